"""Collection of scannable files from a directory tree, archives included."""

from __future__ import annotations

import os
import zipfile

_EXTS = (".html", ".js", ".ts", ".jsx", ".wasm", ".zip", ".jar")
_ARCHIVE_EXTS = (".zip", ".jar")


def _ext(path: str) -> str:
    last = path
    for sep in {"/", os.sep}:
        last = last.rsplit(sep, 1)[-1]
    dot = last.rfind(".")
    return last[dot:].lower() if dot >= 0 else ""


def match_ext(path: str) -> bool:
    """Tell whether ``path`` has an extension worth scanning."""
    return _ext(path) in _EXTS


def _read_archive(path: str, files: dict[str, bytes]) -> None:
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            if match_ext(info.filename):
                files[f"{path}:{info.filename}"] = archive.read(info)


def _collect(path: str, files: dict[str, bytes]) -> None:
    if not match_ext(path):
        return
    if _ext(path) in _ARCHIVE_EXTS:
        _read_archive(path, files)
    else:
        with open(path, "rb") as handle:
            files[path] = handle.read()


def _walk(path: str, files: dict[str, bytes]) -> None:
    with os.scandir(path) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            _walk(entry.path, files)
        else:
            _collect(entry.path, files)


def walk_dir(root: str) -> dict[str, bytes]:
    """Return the contents of every supported file under ``root``, keyed by name.

    Members of zip and jar archives are included under ``archive:member``.
    Entries are visited in lexical order.
    """
    files: dict[str, bytes] = {}
    if os.path.isdir(root) and not os.path.islink(root):
        _walk(root, files)
    else:
        os.stat(root)
        _collect(root, files)
    return files