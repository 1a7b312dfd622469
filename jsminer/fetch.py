"""HTTP retrieval and discovery of the scripts and imports a page refers to."""

from __future__ import annotations

import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

_TIMEOUT = 10.0
_MAX_REDIRECTS = 4

_SCRIPT_SRC_RE = re.compile(
    r"""<script[^>]+src=["']([^"']+)['"]""", re.IGNORECASE | re.DOTALL
)
_IMPORT_RE = re.compile(
    r"""import\s+(?:[^"']+\s+from\s+)?['"]([^'"\n]+)['"]""", re.MULTILINE | re.ASCII
)
_DYN_IMPORT_RE = re.compile(
    r"""import\(\s*['"]([^'"\n]+)['"]\s*\)""", re.MULTILINE | re.ASCII
)


@dataclass(frozen=True)
class FetchedResource:
    """The outcome of a GET request: where it ended up and what came back."""

    url: str
    status: int
    content_type: str
    body: bytes


class _LimitedRedirects(urllib.request.HTTPRedirectHandler):
    # Once the limit is reached the redirect response itself is handed back.
    max_redirections = _MAX_REDIRECTS


def _as_text(data: str | bytes) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def fetch_url(url: str) -> FetchedResource:
    """GET ``url`` with a browser User-Agent, a timeout and a few redirects at most.

    Error statuses are returned like any other response; only transport
    failures raise.
    """
    scheme = urlsplit(url).scheme.lower()
    if scheme not in ("http", "https"):
        raise ValueError(f"unsupported protocol scheme {scheme!r} in {url!r}")

    request = urllib.request.Request(
        url, method="GET", headers={"User-Agent": DEFAULT_USER_AGENT}
    )
    opener = urllib.request.build_opener(_LimitedRedirects())
    try:
        with opener.open(request, timeout=_TIMEOUT) as response:
            return FetchedResource(
                url=response.geturl(),
                status=response.status,
                content_type=response.headers.get("Content-Type", ""),
                body=response.read(),
            )
    except urllib.error.HTTPError as err:
        try:
            body = err.read() if err.fp is not None else b""
        finally:
            err.close()
        headers = err.headers
        return FetchedResource(
            url=err.filename or url,
            status=err.code,
            content_type=headers.get("Content-Type", "") if headers is not None else "",
            body=body,
        )


def extract_script_srcs(data: str | bytes) -> list[str]:
    """Return the ``src`` of every ``<script>`` tag, in document order."""
    return [hit.group(1) for hit in _SCRIPT_SRC_RE.finditer(_as_text(data))]


def extract_js_imports(data: str | bytes) -> list[str]:
    """Return the distinct modules named by static and dynamic imports."""
    text = _as_text(data)
    found: dict[str, None] = {}
    for regex in (_IMPORT_RE, _DYN_IMPORT_RE):
        for hit in regex.finditer(text):
            found[hit.group(1)] = None
    return list(found)


def resolve_url(base: str, ref: str) -> str:
    """Resolve ``ref`` against ``base``; give ``ref`` back unchanged if that fails."""
    try:
        return urljoin(base, ref)
    except ValueError:
        return ref


def same_scope(base_host: str, other_host: str) -> bool:
    """Tell whether ``other_host`` is ``base_host`` or one of its subdomains."""
    base = base_host.removeprefix("www.")
    other = other_host.removeprefix("www.")
    return other == base or other.endswith("." + base)


def _url_ext(url: str) -> str:
    last = url.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def is_html_content(url: str, content_type: str) -> bool:
    """Tell whether a response is HTML, by its content type or its extension."""
    if "html" in content_type:
        return True
    return _url_ext(url).lower() in (".html", ".htm")