"""Match records and the rules that produce them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class Match:
    """A single finding: where it came from, which rule found it, and what it found."""

    source: str = ""
    pattern: str = ""
    value: str = ""
    severity: str = ""


@runtime_checkable
class Rule(Protocol):
    """Anything that can look for findings in a chunk of text."""

    def match_name(self) -> str:
        """Return the name reported as the pattern of each match."""

    def find(self, data: str | bytes) -> list[Match]:
        """Return every match found in ``data``."""


def _as_text(data: str | bytes) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


@dataclass(frozen=True)
class RegexRule:
    """A rule that reports every non-overlapping hit of a regular expression."""

    name: str
    regex: re.Pattern[str]
    severity: str = "info"

    def match_name(self) -> str:
        return self.name

    def find(self, data: str | bytes) -> list[Match]:
        text = _as_text(data)
        return [
            Match(pattern=self.name, value=hit.group(0), severity=self.severity)
            for hit in self.regex.finditer(text)
        ]


_registry: list[Rule] = []


def register_rule(rule: Rule) -> None:
    """Add ``rule`` to the global registry picked up by new extractors."""
    _registry.append(rule)


def registered_rules() -> list[Rule]:
    """Return the rules registered so far, in registration order."""
    return list(_registry)