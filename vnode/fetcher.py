"""
Default module fetcher

Serves source files for evaluation and marks everything else external, to be
loaded by the host import system.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional

from vnode.runtime.executor import FetchResult
from vnode.runtime.utils import to_file_path

logger = logging.getLogger(__name__)

EXTERNAL_DIRS = ("site-packages", "dist-packages")


class FileSystemFetcher:
    """
    fetch_module implementation reading files from disk.

    - dotted names (``json``, ``os.path``) are external
    - files with an interpreted suffix are returned as source
    - other existing files, and anything inside site-packages, are external
    - missing files yield an empty result
    """

    def __init__(self, root: str, suffixes: Iterable[str] = (".py",)):
        self.root = str(Path(root).resolve())
        self.suffixes = tuple(suffixes)

    def external_target(self, identifier: str) -> Optional[str]:
        """Native load target for identifier, or None to interpret it."""
        fs_path = to_file_path(identifier, self.root)
        if "/" not in fs_path and "\\" not in fs_path:
            return fs_path
        path = Path(fs_path)
        if path.suffix not in self.suffixes:
            return fs_path
        if any(part in EXTERNAL_DIRS for part in path.parts):
            return fs_path
        return None

    async def __call__(self, identifier: str) -> FetchResult:
        target = self.external_target(identifier)
        if target is not None:
            is_path = "/" in target or "\\" in target
            if is_path and not Path(target).is_file():
                logger.debug(f"No file for {identifier} at {target}")
                return FetchResult()
            return FetchResult(source_text=target, is_external=True)

        path = Path(to_file_path(identifier, self.root))
        if not path.is_file():
            logger.debug(f"No file for {identifier} at {path}")
            return FetchResult()

        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return FetchResult(source_text=text)
