"""Lightweight extraction of string values from JavaScript source."""

from __future__ import annotations

import re

_STRING_RE = re.compile(
    r'"(?:\\.|[^"\\])*"'
    r"|'(?:\\.|[^'\\])*'"
    r"|`(?:\\.|[^\\`])*`",
    re.DOTALL,
)

_ASSIGN_RE = re.compile(r"(?:var|let|const)\s+\w+\s*=\s*([^;\n]+)", re.MULTILINE | re.ASCII)

_ESCAPE_RE = re.compile(
    r"\\(U[0-9a-fA-F]{8}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{3}|.|$)",
    re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}

_QUOTES = "'\"`"


def _escape_bytes(code: str, quote: str) -> bytes:
    if not code:
        raise ValueError("dangling backslash")
    if code in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[code].encode()
    if code in ("'", '"'):
        if code != quote:
            raise ValueError(f"escaped {code} not allowed here")
        return code.encode()
    head = code[0]
    if head == "x" and len(code) == 3:
        return bytes([int(code[1:], 16)])
    if head in "01234567" and len(code) == 3:
        value = int(code, 8)
        if value > 0xFF:
            raise ValueError("octal escape out of range")
        return bytes([value])
    if head in "uU" and len(code) > 1:
        value = int(code[1:], 16)
        if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
            raise ValueError("invalid code point")
        return chr(value).encode()
    raise ValueError(f"unknown escape \\{code}")


def _decode_escapes(body: str, quote: str) -> str:
    out = bytearray()
    pos = 0
    for esc in _ESCAPE_RE.finditer(body):
        plain = body[pos:esc.start()]
        if quote in plain:
            raise ValueError("unescaped quote")
        out += plain.encode("utf-8", "surrogatepass")
        out += _escape_bytes(esc.group(1), quote)
        pos = esc.end()
    tail = body[pos:]
    if quote in tail:
        raise ValueError("unescaped quote")
    out += tail.encode("utf-8", "surrogatepass")
    return out.decode("utf-8", errors="replace")


def _unquote(literal: str) -> str | None:
    """Interpret a quoted literal with strict escape rules, or return None."""
    if len(literal) < 2:
        return None
    quote = literal[0]
    if quote not in _QUOTES or literal[-1] != quote:
        return None
    body = literal[1:-1]
    if quote == "`":
        if "`" in body:
            return None
        return body.replace("\r", "")
    if "\n" in body:
        return None
    try:
        decoded = _decode_escapes(body, quote)
    except ValueError:
        return None
    if quote == "'" and len(decoded) != 1:
        return None
    return decoded


def _literal_value(literal: str) -> str:
    value = _unquote(literal)
    return value if value is not None else literal.strip(_QUOTES)


def extract_values(data: str | bytes) -> list[str]:
    """Return distinct string values from literals and simple concatenated assignments."""
    src = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    values: dict[str, None] = {}

    for literal in _STRING_RE.finditer(src):
        values[_literal_value(literal.group(0))] = None

    for assignment in _ASSIGN_RE.finditer(src):
        parts = [part.strip() for part in assignment.group(1).split("+")]
        if all(_STRING_RE.search(part) for part in parts):
            values["".join(_literal_value(part) for part in parts)] = None

    return list(values)