"""Test fixtures for the vnode test suite."""
import asyncio
import pytest
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vnode.runtime.cache import ModuleCache
from vnode.runtime.executor import FetchResult, ModuleExecutor
from vnode.runtime.runner import Runner, RunnerOptions
from vnode.runtime.utils import to_file_path


class FakeFetcher:
    """In-memory fetch_module: resolved path -> source text or FetchResult."""

    def __init__(self, modules: Dict[str, Any]):
        self.modules = modules
        self.calls: List[str] = []

    async def __call__(self, identifier: str) -> FetchResult:
        key = to_file_path(identifier, "/proj")
        self.calls.append(key)
        # Yield so concurrent requests interleave
        await asyncio.sleep(0)
        entry = self.modules.get(key)
        if isinstance(entry, FetchResult):
            return entry
        return FetchResult(source_text=entry)


@pytest.fixture
def make_runner():
    """Build a Runner over an in-memory module table."""
    def _make(modules: Dict[str, Any], **options) -> Runner:
        fetcher = FakeFetcher(modules)
        return Runner(RunnerOptions(fetch_module=fetcher, root="/proj", **options))
    return _make


@pytest.fixture
def write_module(tmp_path):
    """Write a module file under tmp_path and return its path."""
    def _write(name: str, source: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path
    return _write


@pytest.fixture
def project(write_module):
    """Two-module project: main.py imports helper.py relatively."""
    write_module("helper.py", (
        "def add(a, b):\n"
        "    return a + b\n"
        "exports['add'] = add\n"
    ))
    return write_module("main.py", (
        "helper = await __ssr_import__('./helper.py')\n"
        "exports['total'] = helper['add'](2, 3)\n"
    ))


@pytest.fixture
def cyclic_project(write_module):
    """a.py and b.py import each other before exporting anything."""
    write_module("b.py", "a = await __ssr_import__('./a.py')\n")
    return write_module("a.py", "b = await __ssr_import__('./b.py')\n")


@pytest.fixture
def make_executor():
    """Build a standalone ModuleExecutor, its cache and fetcher."""
    def _make(modules: Dict[str, Any], **options):
        fetcher = FakeFetcher(modules)
        opts = RunnerOptions(fetch_module=fetcher, root="/proj", **options)
        cache = ModuleCache()
        request_dependency = MagicMock(name="request_dependency")
        return ModuleExecutor(opts, cache, request_dependency), cache, fetcher
    return _make
