"""The scanner: applies rules to files, streams, directory trees and web pages."""

from __future__ import annotations

import http.client
import io
import os
import re
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import IO, AnyStr

from jsminer.endpoints import parse_js_endpoints
from jsminer.fetch import (
    extract_js_imports,
    extract_script_srcs,
    fetch_url,
    is_html_content,
    resolve_url,
    same_scope,
)
from jsminer.filewalk import walk_dir
from jsminer.jsast import extract_values
from jsminer.rules import Match, RegexRule, Rule, registered_rules

_MAX_LINE = 1024 * 1024

_JS_EXTS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".wasm")

# Only these rules run in safe mode.
_JS_RULES = frozenset({"jwt"})

_AWS_RULE_RE = r"(?i)aws_secret_access_key\s*[:=]\s*[A-Za-z0-9/+=]{40}"
# Generic API key style values.
_API_RULE_RE = r"""(?i)api[-_]?key\s*[:=]\s*["']?[A-Za-z0-9\-_]{16,}"""
# Generic access or auth token values.
_ACCESS_RULE_RE = r"""(?i)(?:access|auth)?_?token\s*[:=]\s*["']?[A-Za-z0-9\-_]{10,}"""
# Passwords with at least four non-space characters.
_LOGIN_RULE_RE = r"""(?i)password\s*[:=]\s*["']?\S{4,}"""

_DEFAULT_PATTERNS = {
    "email": r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
    "ipv4": r"\b(?:\d{1,3}\.){3}\d{1,3}\b",
    "jwt": r"eyJ[a-zA-Z0-9_-]+?\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+",
    "aws_secret": _AWS_RULE_RE,
    "google_api": r"AIza[0-9A-Za-z\-_]{35}",
    "bearer": r"(?i)bearer\s+[A-Za-z0-9._-]{10,}",
    "api_key": _API_RULE_RE,
    "token": _ACCESS_RULE_RE,
    "password": _LOGIN_RULE_RE,
}

_POWER_PATTERNS = {
    "phone": r"\d{3}-\d{3}-\d{4}",
    # At least one colon, so plain decimal numbers are not reported.
    "ipv6": r"[0-9a-fA-F]*:[0-9a-fA-F:]+",
    # Unix paths must start the line or follow whitespace; Windows paths need a drive.
    "path": r"(?:^|\s)(/[A-Za-z0-9._-]+(?:/[A-Za-z0-9._-]+)*)|[A-Za-z]:\\\\(?:[^\\\\\s]+\\\\)*[^\\\\\s]+",
}

_FETCH_ERRORS = (OSError, ValueError, http.client.HTTPException)


def parse_simple_yaml(data: str | bytes) -> dict[str, str]:
    """Parse a flat ``key: value`` mapping, skipping blank lines and ``#`` comments.

    Surrounding quotes are removed from values. Raises ValueError on any line
    that is not a non-empty key and a non-empty value separated by a colon.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    out: dict[str, str] = {}
    for raw in text.split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition(":")
        key, value = key.strip(), value.strip()
        if not sep or not key or not value:
            raise ValueError(f"invalid line: {line}")
        out[key] = value.strip("'\"")
    return out


def _ext(path: str) -> str:
    last = path
    for sep in {"/", os.sep}:
        last = last.rsplit(sep, 1)[-1]
    dot = last.rfind(".")
    return last[dot:].lower() if dot >= 0 else ""


def is_js_file(path: str) -> bool:
    """Tell whether ``path`` names a JavaScript, TypeScript or WebAssembly file."""
    return _ext(path) in _JS_EXTS


def _read_all(reader: IO[AnyStr]) -> str:
    data = reader.read()
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def _lines(text: str) -> Iterator[str]:
    if not text:
        return
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    for line in parts:
        if len(line.encode("utf-8", "surrogatepass")) >= _MAX_LINE:
            raise ValueError("token too long")
        yield line.removesuffix("\r")


def _compile_builtin(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.ASCII)


class Extractor:
    """Holds the active rules and scans text sources with them.

    In safe mode only JavaScript sources (and stdin) are scanned, and only
    the JavaScript-specific rules are applied.
    """

    def __init__(self, safe: bool = True) -> None:
        self.safe_mode = safe
        self._allowlist: list[str] = []
        self._rules: list[Rule] = [
            RegexRule(name, _compile_builtin(pattern), "info")
            for patterns in (_DEFAULT_PATTERNS, _POWER_PATTERNS)
            for name, pattern in patterns.items()
        ]
        self._rules.extend(registered_rules())

    def load_rules_file(self, path: str | os.PathLike[str]) -> None:
        """Add the regular expressions named in a simple YAML file as extra rules."""
        with open(path, "rb") as handle:
            rules = parse_simple_yaml(handle.read())
        compiled = [
            RegexRule(name.strip(), re.compile(pattern), "info")
            for name, pattern in rules.items()
        ]
        self._rules.extend(compiled)

    def load_allowlist(self, path: str | os.PathLike[str]) -> None:
        """Add source suffixes to skip, one per line; blank lines and ``#`` comments are ignored."""
        with open(path, encoding="utf-8", errors="replace") as handle:
            for raw in handle:
                line = raw.strip()
                if line and not line.startswith("#"):
                    self._allowlist.append(line)

    def _is_allowed(self, source: str) -> bool:
        return any(source.endswith(suffix) for suffix in self._allowlist)

    def _skipped_in_safe_mode(self, source: str) -> bool:
        return self.safe_mode and source != "stdin" and not is_js_file(source)

    def _active_rules(self) -> list[Rule]:
        if self.safe_mode:
            return [rule for rule in self._rules if rule.match_name() in _JS_RULES]
        return list(self._rules)

    def _apply(self, source: str, chunks: Iterator[str] | list[str]) -> list[Match]:
        rules = self._active_rules()
        matches: list[Match] = []
        for chunk in chunks:
            for rule in rules:
                for match in rule.find(chunk):
                    match.source = source
                    matches.append(match)
        return matches

    def scan_reader(self, source: str, reader: IO[AnyStr]) -> list[Match]:
        """Scan ``reader`` line by line and return every match, labelled with ``source``.

        Raises ValueError if a line is a mebibyte or longer.
        """
        text = _read_all(reader)
        if self._is_allowed(source) or self._skipped_in_safe_mode(source):
            return []
        return self._apply(source, _lines(text))

    def scan_reader_with_endpoints(self, source: str, reader: IO[AnyStr]) -> list[Match]:
        """Scan like :meth:`scan_reader` and add the HTTP endpoints of JavaScript sources.

        Absolute URLs are reported as ``endpoint_url`` and relative paths as
        ``endpoint_path``.
        """
        text = _read_all(reader)
        matches = self.scan_reader(source, io.StringIO(text))
        if source == "stdin" or is_js_file(source):
            matches.extend(
                Match(
                    source=source,
                    pattern="endpoint_url" if endpoint.is_url else "endpoint_path",
                    value=endpoint.value,
                    severity="info",
                )
                for endpoint in parse_js_endpoints(text)
            )
        return matches

    def scan_reader_ast(self, source: str, reader: IO[AnyStr]) -> list[Match]:
        """Apply the rules to the string values found in JavaScript source."""
        text = _read_all(reader)
        if self._skipped_in_safe_mode(source):
            return []
        return self._apply(source, extract_values(text))

    def scan_dir(self, root: str | os.PathLike[str], workers: int = 1) -> list[Match]:
        """Scan every supported file under ``root``, archives included, with ``workers`` threads."""
        files = walk_dir(os.fspath(root))

        def scan(item: tuple[str, bytes]) -> list[Match]:
            name, data = item
            return self.scan_reader(name, io.BytesIO(data))

        with ThreadPoolExecutor(max_workers=max(workers, 1)) as pool:
            results = list(pool.map(scan, files.items()))
        return [match for found in results for match in found]

    def scan_url(self, url: str, endpoints: bool = False, external: bool = True) -> list[Match]:
        """Scan the resource at ``url`` and the scripts and imports it refers to.

        With ``external`` false only resources on the starting host or its
        subdomains are followed. Failure to fetch ``url`` itself raises;
        failures on referenced resources are skipped.
        """
        from urllib.parse import urlsplit

        base_host = urlsplit(url).hostname or ""
        return self._scan_url(url, base_host, endpoints, set(), external)

    def _follow(
        self,
        url: str,
        base_host: str,
        endpoints: bool,
        visited: set[str],
        external: bool,
        require_http: bool,
    ) -> list[Match]:
        from urllib.parse import urlsplit

        try:
            parts = urlsplit(url)
            host = parts.hostname or ""
        except ValueError:
            return []
        if require_http and parts.scheme not in ("http", "https"):
            return []
        if not (external or same_scope(base_host, host)):
            return []
        try:
            return self._scan_url(url, base_host, endpoints, visited, external)
        except _FETCH_ERRORS:
            return []

    def _scan_url(
        self,
        url: str,
        base_host: str,
        endpoints: bool,
        visited: set[str],
        external: bool,
    ) -> list[Match]:
        if url in visited:
            return []
        visited.add(url)

        resource = fetch_url(url)
        final_url = resource.url
        text = resource.body.decode("utf-8", errors="replace")
        matches: list[Match] = []

        if is_html_content(final_url, resource.content_type):
            if not self.safe_mode:
                matches.extend(self.scan_reader(final_url, io.StringIO(text)))
            for src in extract_script_srcs(text):
                matches.extend(
                    self._follow(
                        resolve_url(final_url, src),
                        base_host,
                        endpoints,
                        visited,
                        external,
                        require_http=False,
                    )
                )
            return matches

        if endpoints:
            matches.extend(self.scan_reader_with_endpoints(final_url, io.StringIO(text)))
        else:
            matches.extend(self.scan_reader(final_url, io.StringIO(text)))

        for imported in extract_js_imports(text):
            matches.extend(
                self._follow(
                    resolve_url(final_url, imported),
                    base_host,
                    endpoints,
                    visited,
                    external,
                    require_http=True,
                )
            )
        return matches