"""Command-line entry point: scan files, stdin or URLs and report what was found."""

from __future__ import annotations

import http.client
import os
import re
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from jsminer.entropy import register as _register_entropy
from jsminer.extractor import Extractor
from jsminer.output import Printer, banner
from jsminer.rules import Match

VERSION = "0.01v"

_USAGE_LINE = "usage: jsminer [URL|PATH|-] [flags]"

_BOOL_FLAGS = {
    "safe": ("safe mode - only scan JS", True),
    "endpoints": ("extract HTTP endpoints from JavaScript", False),
    "external": ("follow external scripts and imports", True),
    "render": ("render pages in a headless browser (not available; ignored)", False),
    "quiet": ("suppress banner", False),
}

_STRING_FLAGS = {
    "format": ("output format: pretty or json", "json"),
    "allow": ("allowlist file", ""),
    "rules": ("extra regex rules YAML", ""),
    "output": ("output file (stdout default)", ""),
    "targets": ("file with list of targets", ""),
    "plugins": ("comma-separated plugin names", ""),
}

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_PLUGINS: dict[str, Callable[[], None]] = {"entropy": _register_entropy}
_loaded_plugins: set[str] = set()

_SCAN_ERRORS = (OSError, ValueError, re.error, http.client.HTTPException)


class _UsageError(Exception):
    """Raised when the command line cannot be parsed."""


class _HelpRequested(Exception):
    """Raised when -h or -help is given."""


@dataclass
class _Options:
    format: str = "json"
    safe: bool = True
    allow: str = ""
    rules: str = ""
    endpoints: bool = False
    external: bool = True
    render: bool = False
    output: str = ""
    quiet: bool = False
    targets: str = ""
    plugins: str = ""
    positional: list[str] = field(default_factory=list)


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean {text!r}")


def _usage_text() -> str:
    lines = [_USAGE_LINE]
    for name, (help_text, default) in sorted({**_BOOL_FLAGS, **_STRING_FLAGS}.items()):
        lines.append(f"  -{name}")
        shown = f" (default {default!r})" if default not in ("", False) else ""
        lines.append(f"        {help_text}{shown}")
    return "\n".join(lines)


def _parse_leading(args: list[str], opts: _Options) -> list[str]:
    """Consume flags up to the first positional argument; return the rest."""
    while args:
        arg = args[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        if arg == "--":
            return args[1:]
        args = args[1:]
        name = arg[2:] if arg.startswith("--") else arg[1:]
        if not name or name[0] in "-=":
            raise _UsageError(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")
        if name in ("h", "help"):
            raise _HelpRequested
        if name in _BOOL_FLAGS:
            if has_value:
                try:
                    setattr(opts, name, _parse_bool(value))
                except ValueError:
                    raise _UsageError(
                        f"invalid boolean value {value!r} for -{name}"
                    ) from None
            else:
                setattr(opts, name, True)
        elif name in _STRING_FLAGS:
            if not has_value:
                if not args:
                    raise _UsageError(f"flag needs an argument: -{name}")
                value, args = args[0], args[1:]
            setattr(opts, name, value)
        else:
            raise _UsageError(f"flag provided but not defined: -{name}")
    return args


def _parse_trailing(args: list[str], opts: _Options) -> None:
    """Pick up flags written after positional arguments."""
    it = iter(enumerate(args))
    skip_to = -1
    for i, arg in it:
        if i <= skip_to:
            continue
        if not arg.startswith("-"):
            opts.positional.append(arg)
            continue
        name, has_value, value = arg.lstrip("-").partition("=")
        has_next = i + 1 < len(args)
        if name in ("endpoints", "render", "safe", "quiet"):
            setattr(opts, name, True)
        elif name == "external":
            text = "true"
            if has_value:
                text = value
            elif has_next and not args[i + 1].startswith("-"):
                text = args[i + 1]
                skip_to = i + 1
            try:
                opts.external = _parse_bool(text)
            except ValueError:
                opts.external = True
        elif name in _STRING_FLAGS:
            if has_next:
                setattr(opts, name, args[i + 1])
                skip_to = i + 1
        else:
            opts.positional.append(arg)


def _parse_args(argv: Sequence[str]) -> _Options:
    opts = _Options()
    rest = _parse_leading(list(argv), opts)
    _parse_trailing(rest, opts)
    return opts


def _read_targets(path: str) -> list[str]:
    with open(path, encoding="utf-8", errors="replace") as handle:
        stripped = (line.strip() for line in handle)
        return [line for line in stripped if line and not line.startswith("#")]


def _load_plugins(spec: str) -> None:
    for entry in (part.strip() for part in spec.split(",")):
        if not entry:
            continue
        base = os.path.basename(entry)
        name = os.path.splitext(base)[0] if "." in base else base
        loader = _PLUGINS.get(name)
        if loader is None:
            raise ValueError(f"unknown plugin: {entry}")
        if name not in _loaded_plugins:
            loader()
            _loaded_plugins.add(name)


def is_url(s: str) -> bool:
    """Tell whether ``s`` is an http or https URL."""
    return len(s) > 4 and s.startswith(("http://", "https://"))


def _scan_target(extractor: Extractor, target: str, opts: _Options) -> list[Match]:
    if target == "-":
        if opts.endpoints:
            return extractor.scan_reader_with_endpoints("stdin", sys.stdin)
        return extractor.scan_reader("stdin", sys.stdin)
    if is_url(target):
        return extractor.scan_url(target, opts.endpoints, opts.external)
    name = os.path.basename(target)
    with open(target, "rb") as handle:
        if opts.endpoints:
            return extractor.scan_reader_with_endpoints(name, handle)
        return extractor.scan_reader(name, handle)


def _run(opts: _Options) -> int:
    targets = _read_targets(opts.targets) if opts.targets else []
    targets.extend(opts.positional)
    if not targets:
        if not opts.quiet:
            print(banner(VERSION), file=sys.stderr)
        print(_USAGE_LINE, file=sys.stderr)
        return 2

    if opts.plugins:
        _load_plugins(opts.plugins)

    extractor = Extractor(opts.safe)
    if opts.rules:
        extractor.load_rules_file(opts.rules)
    if opts.allow:
        extractor.load_allowlist(opts.allow)

    matches: list[Match] = []
    for target in targets:
        matches.extend(_scan_target(extractor, target, opts))

    printer = Printer(
        format=opts.format,
        show_banner=not opts.quiet,
        show_source=len(targets) > 1,
        version=VERSION,
    )
    if opts.output:
        with open(opts.output, "w", encoding="utf-8") as out:
            printer.print(out, matches)
    else:
        printer.print(sys.stdout, matches)

    return 1 if matches else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the scanner; return 0 when nothing was found, 1 on findings or errors, 2 on misuse."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        opts = _parse_args(args)
    except _HelpRequested:
        print(_usage_text(), file=sys.stderr)
        return 0
    except _UsageError as err:
        print(err, file=sys.stderr)
        print(_usage_text(), file=sys.stderr)
        return 2
    try:
        return _run(opts)
    except _SCAN_ERRORS as err:
        print(f"jsminer: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())