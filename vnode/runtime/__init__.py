"""
vnode Runtime Engine

This module provides the core runtime for running modules on demand:
- Runner: Entry point, owns the module cache
- RequestCoordinator: Request deduplication and cycle detection
- ModuleExecutor: Fetch-or-stub-or-execute for one module
- ModuleCache: Resolved path -> CacheRecord
- ExportObject / merge_all: Export objects and "export all" interop
- interpret / InteropView: Native loading of external modules
"""

from vnode.runtime.cache import ModuleCache, CacheRecord
from vnode.runtime.coordinator import RequestCoordinator
from vnode.runtime.errors import ModuleLoadError, CircularDependencyError
from vnode.runtime.executor import ModuleExecutor, FetchResult, ModuleProxy
from vnode.runtime.exports import (
    ExportObject,
    AssignmentExport,
    NamedExports,
    apply_export,
    merge_all,
)
from vnode.runtime.external import InteropView, interpret, load_native
from vnode.runtime.runner import Runner, RunnerOptions

__all__ = [
    "Runner",
    "RunnerOptions",
    "RequestCoordinator",
    "ModuleExecutor",
    "FetchResult",
    "ModuleProxy",
    "ModuleCache",
    "CacheRecord",
    "ExportObject",
    "AssignmentExport",
    "NamedExports",
    "apply_export",
    "merge_all",
    "InteropView",
    "interpret",
    "load_native",
    "ModuleLoadError",
    "CircularDependencyError",
]
