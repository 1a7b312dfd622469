"""Banner and result rendering."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO

from jsminer.rules import Match

_RED = "\x1b[31m"
_YELLOW = "\x1b[33m"
_GREEN = "\x1b[32m"
_RESET = "\x1b[0m"

_ART = (
    "       _______           _",
    "      / / ___/____ ___  (_)___  ___  _____",
    " __  / /\\__ \\/ __ `__ \\/ / __ \\/ _ \\/ ___/",
    "/ /_/ /___/ / / / / / / / / / /  __/ /",
    "\\____//____/_/ /_/ /_/_/_/ /_/\\___/_/",
)

_JSON_SAFE = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def banner(version: str) -> str:
    """Return the coloured start-up banner for ``version``."""
    art = "\n".join(f"{_GREEN}{line}{_RESET}" for line in _ART)
    version_line = f"{_GREEN}v{version}{_RESET}"
    slogan = f"{_RED}Bij\u00ee{_RESET} {_YELLOW}\u2605{_RESET} {_GREEN}Kurdistan{_RESET}"
    return f"{art}\n{version_line}\n{slogan}\n"


def _html_safe_json(obj: object) -> str:
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _JSON_SAFE.items():
        text = text.replace(char, escaped)
    return text


@dataclass
class Printer:
    """Renders matches as JSON or as one human-readable line each."""

    format: str = "json"
    show_banner: bool = True
    show_source: bool = False
    version: str = ""

    def print(self, out: TextIO, matches: Iterable[Match]) -> None:
        if self.show_banner:
            out.write(banner(self.version) + "\n")

        if self.format == "pretty":
            for m in matches:
                prefix = f"{m.source}: " if self.show_source else ""
                out.write(f"{prefix}[{m.pattern}] ({m.severity}) {m.value}\n")
            return

        records = []
        for m in matches:
            record = {}
            if self.show_source and m.source:
                record["source"] = m.source
            record.update(pattern=m.pattern, value=m.value, severity=m.severity)
            records.append(record)
        out.write(_html_safe_json(records) + "\n")