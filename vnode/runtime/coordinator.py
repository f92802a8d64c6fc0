"""
vnode Request Coordinator

Single entry point for module requests: deduplicates in-flight loads through
the module cache and watches the call stack for dependency cycles.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, TYPE_CHECKING

from vnode.runtime.cache import ModuleCache
from vnode.runtime.errors import CircularDependencyError
from vnode.runtime.executor import ModuleExecutor
from vnode.runtime.utils import normalize_id, resolve_relative, to_file_path

if TYPE_CHECKING:
    from vnode.runtime.runner import RunnerOptions

logger = logging.getLogger(__name__)


class RequestCoordinator:
    """
    Coordinates module requests for one runner.

    A resolved path is executed at most once; every later or concurrent
    request for it awaits the same task, including a task that failed.
    """

    def __init__(self, options: "RunnerOptions", cache: ModuleCache):
        self.options = options
        self.cache = cache
        self.executor = ModuleExecutor(options, cache, self.request_dependency)

    def resolve(self, raw_id: str):
        """Normalize raw_id and map it to its cache key."""
        identifier = normalize_id(raw_id, self.options.base)
        return identifier, to_file_path(identifier, self.options.root)

    async def request(self, raw_id: str, call_stack: List[str]) -> Any:
        """
        Load a module, sharing any load already in flight for its path.

        Cycle detection only sees call_stack, i.e. one branch of the import
        graph. Two concurrently running branches (for example siblings under
        ``asyncio.gather``) that import each other wait on each other's
        pending task forever, even when both already hold partial exports.
        Import mutually dependent modules sequentially.

        Args:
            raw_id: Module identifier as requested
            call_stack: Identifiers of the executions leading here

        Returns:
            The module's export object
        """
        identifier, fs_path = self.resolve(raw_id)

        record = self.cache.get(fs_path)
        if record is not None and record.pending is not None:
            logger.debug(f"Cache hit for {fs_path}")
            return await record.pending

        task = asyncio.ensure_future(
            self.executor.execute(identifier, fs_path, call_stack + [identifier])
        )
        self.cache.set(fs_path, pending=task)

        return await task

    async def request_dependency(self, dependency: str, call_stack: List[str]) -> Any:
        """
        Load a dependency on behalf of the module at the top of call_stack.

        A dependency whose resolved path is already on the stack closes a
        cycle. It resolves to the module's export object when that already
        holds something, and raises CircularDependencyError otherwise.
        """
        if call_stack:
            dependency = resolve_relative(dependency, call_stack[-1])
        dependency = normalize_id(dependency, self.options.base)

        fs_path = to_file_path(dependency, self.options.root)
        if any(to_file_path(entry, self.options.root) == fs_path for entry in call_stack):
            record = self.cache.get(fs_path)
            if record is None or not record.exports:
                raise CircularDependencyError(call_stack + [dependency])
            logger.debug(f"Returning partial exports for cyclic {dependency}")
            return record.exports

        return await self.request(dependency, call_stack)
