"""
vnode - run Python source files on demand

Modules are fetched, evaluated in their own namespace and cached per runner,
with dependencies requested from inside module bodies.

Exports:
- Runner / RunnerOptions: Run a file and get its export object
- FileSystemFetcher: Default fetcher reading modules from disk
"""

from vnode.runtime import (
    Runner,
    RunnerOptions,
    ModuleCache,
    ExportObject,
    FetchResult,
    ModuleLoadError,
    CircularDependencyError,
)
from vnode.fetcher import FileSystemFetcher

__version__ = "0.1.0"

__all__ = [
    "Runner",
    "RunnerOptions",
    "ModuleCache",
    "ExportObject",
    "FetchResult",
    "FileSystemFetcher",
    "ModuleLoadError",
    "CircularDependencyError",
]
