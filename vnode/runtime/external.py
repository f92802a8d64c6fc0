"""
vnode External-Module Interpreter

Modules the fetcher marks as external are not evaluated by the runner. They
are loaded through the host's own import system and, when they carry a sole
``default`` value, wrapped so that both access styles keep working.
"""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import logging
import os
import sys
from collections.abc import Mapping
from typing import Any, Callable, List

from vnode.runtime.exports import DEFAULT_KEY, enumerable_keys

logger = logging.getLogger(__name__)

_MISSING = object()

_PRIMITIVES = (str, bytes, bytearray, int, float, complex, bool)


def _is_path(target: str) -> bool:
    return os.sep in target or "/" in target or target.endswith(".py")


def load_native(target: str) -> Any:
    """
    Load target through the host import system.

    Dotted names go through importlib.import_module; filesystem paths are
    loaded from their location and registered in sys.modules under their path.
    """
    if not _is_path(target):
        return importlib.import_module(target)

    path = os.path.abspath(target)
    if path in sys.modules:
        return sys.modules[path]
    name = os.path.splitext(os.path.basename(path))[0]
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load native module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[path] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[path]
        raise
    return module


def create_require(filename: str) -> Callable[[str], Any]:
    """Synchronous native loader resolving relative paths against filename."""
    base_dir = os.path.dirname(filename)

    def require(target: str) -> Any:
        if target.startswith("./") or target.startswith("../"):
            target = os.path.normpath(os.path.join(base_dir, target))
        return load_native(target)

    return require


def _has(obj: Any, key: str) -> bool:
    if isinstance(obj, Mapping):
        return key in obj
    return hasattr(obj, key)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, _MISSING)
    return getattr(obj, key, _MISSING)


def _set(obj: Any, key: str, value: Any) -> None:
    if isinstance(obj, Mapping):
        obj[key] = value
    else:
        setattr(obj, key, value)


def _delete(obj: Any, key: str) -> bool:
    if not _has(obj, key):
        return False
    if isinstance(obj, Mapping):
        del obj[key]
    else:
        delattr(obj, key)
    return True


def _is_object(value: Any) -> bool:
    """True for values whose properties can be looked into."""
    if value is None or value is _MISSING or isinstance(value, _PRIMITIVES):
        return False
    return not callable(value)


def has_nested_default(module: Any) -> bool:
    """True when the module's default itself carries a default."""
    inner = _get(module, DEFAULT_KEY)
    return _is_object(inner) and _has(inner, DEFAULT_KEY)


class InteropView:
    """
    Fallback view over a natively loaded module with a default value.

    Lookups go to the module first and fall through to its default object
    when the module lacks the key. With a nested default, ``default`` itself
    resolves to the inner one.
    """

    def __init__(self, module: Any, try_default: bool = False):
        object.__setattr__(self, "_module", module)
        object.__setattr__(self, "_try_default", try_default)

    def _fallback(self) -> Any:
        inner = _get(self._module, DEFAULT_KEY)
        return inner if _is_object(inner) else _MISSING

    def _use_inner(self, key: str, outer_found: bool) -> bool:
        return (self._try_default and key == DEFAULT_KEY) or not outer_found

    def get(self, key: str, default: Any = None) -> Any:
        result = _get(self._module, key)
        inner = self._fallback()
        if inner is not _MISSING and self._use_inner(key, result is not _MISSING):
            result = _get(inner, key)
        return default if result is _MISSING else result

    def set(self, key: str, value: Any) -> None:
        inner = self._fallback()
        if inner is not _MISSING and self._try_default and key == DEFAULT_KEY:
            _set(inner, key, value)
        else:
            _set(self._module, key, value)

    def has(self, key: str) -> bool:
        found = _has(self._module, key)
        inner = self._fallback()
        if inner is not _MISSING and self._use_inner(key, found):
            return _has(inner, key)
        return found

    def delete(self, key: str) -> bool:
        inner = self._fallback()
        if inner is not _MISSING and self._try_default and key == DEFAULT_KEY:
            return _delete(inner, key)
        if _delete(self._module, key):
            return True
        return inner is not _MISSING and _delete(inner, key)

    def keys(self) -> List[str]:
        return enumerable_keys(self._module)

    @property
    def module(self) -> Any:
        return self._module

    def __getitem__(self, key: str) -> Any:
        result = self.get(key, _MISSING)
        if result is _MISSING:
            raise KeyError(key)
        return result

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __getattr__(self, name: str) -> Any:
        result = self.get(name, _MISSING)
        if result is _MISSING:
            raise AttributeError(name)
        return result

    def __setattr__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delattr__(self, name: str) -> None:
        if not self.delete(name):
            raise AttributeError(name)

    def __repr__(self) -> str:
        return f"InteropView({self._module!r})"


async def interpret(target: str, interpret_default: bool = True) -> Any:
    """
    Load an external module natively.

    Args:
        target: Dotted module name or filesystem path
        interpret_default: Wrap modules exposing ``default`` in an InteropView

    Returns:
        The loaded module, or an InteropView over it
    """
    module = await asyncio.to_thread(load_native, target)

    if interpret_default and _has(module, DEFAULT_KEY):
        try_default = has_nested_default(module)
        logger.debug(f"Interpreting default of {target} (nested={try_default})")
        return InteropView(module, try_default)

    return module
