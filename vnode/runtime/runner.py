"""
vnode Runner

Entry point for running a file as if natively imported.

Key classes:
- RunnerOptions: Construction-time configuration
- Runner: Resolves a target file and starts a request cycle
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from vnode.runtime.cache import ModuleCache
from vnode.runtime.coordinator import RequestCoordinator
from vnode.runtime.utils import to_fs_id

logger = logging.getLogger(__name__)

FetchModule = Callable[[str], Awaitable[Any]]


@dataclass
class RunnerOptions:
    """Configuration for a Runner."""
    fetch_module: Optional[FetchModule] = None
    root: str = field(default_factory=os.getcwd)
    base: Optional[str] = None
    request_stubs: Dict[str, Any] = field(default_factory=dict)
    interpret_default: bool = True
    module_cache: Optional[ModuleCache] = None


class Runner:
    """
    Runs files through a RequestCoordinator.

    The module cache belongs to the runner instance; pass one in through
    options.module_cache to share or pre-seed it.
    """

    def __init__(self, options: RunnerOptions = None):
        self.options = options or RunnerOptions()
        self.root = os.path.abspath(self.options.root)
        self.options.root = self.root
        if self.options.fetch_module is None:
            from vnode.fetcher import FileSystemFetcher
            self.options.fetch_module = FileSystemFetcher(self.root)
        self.module_cache = self.options.module_cache
        if self.module_cache is None:
            self.module_cache = ModuleCache()
        self.coordinator = RequestCoordinator(self.options, self.module_cache)

    async def run(self, file_path: str) -> Any:
        """
        Execute file_path and return its export object.

        Raises:
            ModuleLoadError: The file or one of its dependencies produced no code
            CircularDependencyError: A cycle closed before exports were set
        """
        identifier = to_fs_id(file_path)
        logger.debug(f"Running {identifier}")
        return await self.coordinator.request(identifier, [])
