"""
vnode identifier and path utilities

Module identifiers live in a URL-like, forward-slash namespace. They are
normalized against a base prefix before lookup, then mapped to the
filesystem path used as the cache key.
"""

from __future__ import annotations

import os
import posixpath
import re
import sys
from pathlib import Path
from typing import Optional

is_windows = sys.platform == "win32"

FS_PREFIX = "/@fs/"

_ID_PREFIXES = [
    (re.compile(r"^/@id/__x00__"), "\0"),
    (re.compile(r"^/@id/"), ""),
    (re.compile(r"^__vite-browser-external:"), ""),
    (re.compile(r"^node:"), ""),
    (re.compile(r"[?&]v=\w+"), "?"),
    (re.compile(r"\?$"), ""),
]

_DRIVE = re.compile(r"^/[A-Za-z]:/")


def slash(path: str) -> str:
    """Convert backslashes to forward slashes."""
    return path.replace("\\", "/")


def normalize_id(raw: str, base: Optional[str] = None) -> str:
    """
    Normalize a raw module identifier.

    Strips the configured base prefix and the virtual-module prefixes, drops
    version query parameters and a dangling ``?``.
    """
    identifier = raw
    if base and identifier.startswith(base):
        identifier = "/" + identifier[len(base):]
    for pattern, replacement in _ID_PREFIXES:
        identifier = pattern.sub(replacement, identifier, count=1)
    return identifier


def to_file_path(identifier: str, root: str) -> str:
    """
    Map an identifier to the filesystem path used as its cache key.

    Resolving an already resolved path returns it unchanged. A ``/``-rooted
    identifier is joined under root unless it already names an existing
    file on disk.
    """
    root = slash(root)
    if slash(identifier).startswith(FS_PREFIX):
        absolute = slash(identifier)[len(FS_PREFIX) - 1:]
    elif identifier.startswith(posixpath.dirname(root)):
        absolute = identifier
    elif identifier.startswith("/") and os.path.exists(identifier.split("?", 1)[0]):
        absolute = identifier
    elif identifier.startswith("/"):
        absolute = slash(os.path.normpath(os.path.join(root, identifier[1:])))
    else:
        absolute = identifier

    if absolute.startswith("//"):
        absolute = absolute[1:]

    if is_windows and _DRIVE.match(absolute):
        return str(Path(absolute[1:]))
    return absolute


def to_fs_id(file_path: str) -> str:
    """Identifier for a file on disk, addressed through the /@fs/ prefix."""
    absolute = slash(os.path.abspath(file_path))
    return FS_PREFIX + absolute.lstrip("/")


def is_relative(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../")


def resolve_relative(specifier: str, importer: str) -> str:
    """Resolve ./ and ../ specifiers against the importing identifier."""
    if not is_relative(specifier):
        return specifier
    importer_path = importer.split("?", 1)[0]
    joined = posixpath.join(posixpath.dirname(importer_path), specifier)
    return posixpath.normpath(joined)


def file_url(path: str) -> str:
    """file:// URL for a resolved path."""
    return Path(os.path.abspath(path)).as_uri()
