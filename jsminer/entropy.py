"""A rule that flags long base64-like strings with high Shannon entropy."""

from __future__ import annotations

import math
import re
from collections import Counter

from jsminer.rules import Match, register_rule

_CANDIDATE_RE = re.compile(r"[A-Za-z0-9+/=]{20,}")
_THRESHOLD = 4.5


def shannon_entropy(s: str) -> float:
    """Return the Shannon entropy of ``s`` in bits per symbol."""
    length = len(s.encode("utf-8"))
    entropy = 0.0
    for count in Counter(s).values():
        p = count / length
        entropy -= p * math.log2(p)
    return entropy


class EntropyRule:
    """Flags candidate strings whose entropy reaches the threshold."""

    def match_name(self) -> str:
        return "entropy"

    def find(self, data: str | bytes) -> list[Match]:
        text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
        return [
            Match(pattern="entropy", value=hit.group(0), severity="high")
            for hit in _CANDIDATE_RE.finditer(text)
            if shannon_entropy(hit.group(0)) >= _THRESHOLD
        ]


def register() -> None:
    """Make the entropy rule available to extractors created afterwards."""
    register_rule(EntropyRule())