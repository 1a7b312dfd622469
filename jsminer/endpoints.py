"""Extraction of HTTP endpoints quoted in JavaScript source."""

from __future__ import annotations

import re
from dataclasses import dataclass

_ENDPOINT_RE = re.compile(
    r"""["'`](((?:https?:)?//[^"'`\s]+|\.?\.?/[^"'`\s]+))["'`]""",
    re.IGNORECASE | re.ASCII,
)

_URL_PREFIXES = ("http://", "https://", "//")


@dataclass(frozen=True)
class JSEndpoint:
    """An endpoint string and whether it is an absolute URL."""

    value: str
    is_url: bool


def parse_js_endpoints(data: str | bytes) -> list[JSEndpoint]:
    """Return quoted absolute URLs, protocol-relative URLs and relative paths in order."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    return [
        JSEndpoint(value=hit.group(1), is_url=hit.group(1).startswith(_URL_PREFIXES))
        for hit in _ENDPOINT_RE.finditer(text)
    ]