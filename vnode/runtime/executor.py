"""
vnode Module Executor

Performs one module load: stub short-circuit, native delegation for external
modules, or evaluation of the fetched source inside a fresh namespace.

Key classes:
- FetchResult: What the fetcher returns for an identifier
- ModuleProxy: The ``module`` object seen by assignment-style code
- ModuleExecutor: Fetch-or-stub-or-execute for one module
"""

from __future__ import annotations

import ast
import inspect
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TYPE_CHECKING

from vnode.runtime.cache import ModuleCache
from vnode.runtime.errors import ModuleLoadError
from vnode.runtime.exports import (
    DEFAULT_KEY,
    AssignmentExport,
    ExportObject,
    NamedExports,
    apply_export,
)
from vnode.runtime.external import create_require, interpret
from vnode.runtime.utils import file_url

if TYPE_CHECKING:
    from vnode.runtime.runner import RunnerOptions

logger = logging.getLogger(__name__)

RequestDependency = Callable[[str, List[str]], Awaitable[Any]]


@dataclass
class FetchResult:
    """
    Fetcher output for one identifier.

    source_text holds executable code, or the native load target when
    is_external is set.
    """
    source_text: Optional[str] = None
    is_external: bool = False

    @classmethod
    def coerce(cls, value: Any) -> "FetchResult":
        if isinstance(value, FetchResult):
            return value
        if value is None:
            return cls()
        if isinstance(value, Mapping):
            return cls(
                source_text=value.get("source_text"),
                is_external=bool(value.get("is_external", False)),
            )
        raise TypeError(f"Unsupported fetch result: {type(value).__name__}")


class ModuleProxy:
    """``module`` binding: assigning ``exports`` bridges into named exports."""

    def __init__(self, exports: ExportObject):
        self._exports = exports

    @property
    def exports(self) -> Any:
        return self._exports.get(DEFAULT_KEY)

    @exports.setter
    def exports(self, value: Any) -> None:
        apply_export(self._exports, AssignmentExport(value))


class ModuleExecutor:
    """
    Executes single modules for a RequestCoordinator.

    The dependency request capability is injected so module bodies re-enter
    the coordinator rather than any global hook.
    """

    def __init__(self,
                 options: "RunnerOptions",
                 cache: ModuleCache,
                 request_dependency: RequestDependency):
        self.options = options
        self.cache = cache
        self.request_dependency = request_dependency

    async def execute(self, identifier: str, fs_path: str, call_stack: List[str]) -> Any:
        """
        Execute one module.

        Args:
            identifier: Normalized module identifier
            fs_path: Resolved path, the cache key
            call_stack: In-progress identifiers, ending with identifier

        Returns:
            The module's export object

        Raises:
            ModuleLoadError: The fetcher produced nothing to run
        """
        stubs = self.options.request_stubs
        if stubs and identifier in stubs:
            logger.debug(f"Using stub for {identifier}")
            return stubs[identifier]

        fetched = FetchResult.coerce(await self.options.fetch_module(identifier))

        if fetched.is_external:
            logger.debug(f"Externalizing {identifier} -> {fetched.source_text}")
            module = await interpret(fetched.source_text, self.options.interpret_default)
            self.cache.set(fs_path, exports=module)
            return module

        if fetched.source_text is None:
            raise ModuleLoadError(identifier)

        exports = ExportObject()
        self.cache.set(fs_path, source_text=fetched.source_text, exports=exports)

        async def request(dep: str) -> Any:
            return await self.request_dependency(dep, call_stack)

        context = self.prepare_context({
            "__ssr_import__": request,
            "__ssr_dynamic_import__": request,
            "__ssr_exports__": exports,
            "__ssr_export_all__": lambda obj: apply_export(exports, NamedExports(obj)),
            "__ssr_import_meta__": {"url": file_url(fs_path)},

            "require": create_require(fs_path),
            "exports": exports,
            "module": ModuleProxy(exports),
            "__file__": fs_path,
            "__dirname__": os.path.dirname(fs_path),
            "__name__": identifier,
        })

        logger.debug(f"Executing {identifier}")
        await self.evaluate(fetched.source_text, fs_path, context)

        return exports

    def prepare_context(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for subclasses to extend the module namespace."""
        return context

    async def evaluate(self, source_text: str, filename: str, namespace: Dict[str, Any]) -> None:
        """Run source_text in namespace, awaiting it when it awaits."""
        code = compile(source_text, filename, "exec", flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT)
        result = eval(code, namespace)
        if inspect.iscoroutine(result):
            await result
