"""
vnode Export Objects

An export object is what a module exposes to its dependents. Modules either
assign one value for their whole public surface (assignment style) or write
individual names (named-binding style); both end up in one ExportObject.

Key classes:
- ExportObject: Mutable mapping of export names, supporting live accessors
- AssignmentExport / NamedExports: The two export shapes seen at the boundary
- merge_all: "export all" merge of a source's keys as live accessors
"""

from __future__ import annotations

import logging
import types
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Union

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"


@dataclass
class _Accessor:
    """Getter-backed entry, re-evaluated on every read."""
    getter: Callable[[], Any]
    configurable: bool = True


class ExportObject(MutableMapping):
    """
    Mapping from export name to value.

    Entries are either plain values or accessors installed with define().
    Accessors are read through on every lookup so changes in the object they
    were merged from stay visible. An empty export object is falsy.
    """

    def __init__(self, initial: Mapping = None):
        self._entries: Dict[str, Any] = {}
        if initial:
            self.update(initial)

    def define(self, key: str, getter: Callable[[], Any], configurable: bool = True) -> None:
        """Install a live accessor for key."""
        current = self._entries.get(key)
        if isinstance(current, _Accessor) and not current.configurable:
            raise TypeError(f"Cannot redefine export: {key}")
        self._entries[key] = _Accessor(getter, configurable)

    def is_accessor(self, key: str) -> bool:
        return isinstance(self._entries.get(key), _Accessor)

    def __getitem__(self, key: str) -> Any:
        entry = self._entries[key]
        if isinstance(entry, _Accessor):
            return entry.getter()
        return entry

    def __setitem__(self, key: str, value: Any) -> None:
        current = self._entries.get(key)
        if isinstance(current, _Accessor) and not current.configurable:
            raise TypeError(f"Cannot assign to read-only export: {key}")
        self._entries[key] = value

    def __delitem__(self, key: str) -> None:
        current = self._entries.get(key)
        if isinstance(current, _Accessor) and not current.configurable:
            raise TypeError(f"Cannot delete export: {key}")
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getattr__(self, name: str) -> Any:
        # Dunder lookups (copy, pickle) and _entries before __init__ never hit the mapping
        if name == "_entries" or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"Export object has no export {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_entries":
            object.__setattr__(self, name, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError:
            raise AttributeError(f"Export object has no export {name!r}") from None

    def __repr__(self) -> str:
        return f"ExportObject({list(self._entries)!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the current values."""
        return {key: self[key] for key in self}


@dataclass
class AssignmentExport:
    """A module assigned a single value as its entire public surface."""
    value: Any


@dataclass
class NamedExports:
    """A set of independently named bindings to re-export."""
    bindings: Any


ExportShape = Union[AssignmentExport, NamedExports]


def enumerable_keys(source: Any) -> List[str]:
    """Keys of source that an "export all" merge should copy."""
    if source is None:
        return []
    if isinstance(source, Mapping):
        return [k for k in source.keys() if isinstance(k, str)]
    if hasattr(source, "keys") and callable(source.keys) and hasattr(source, "get"):
        return [k for k in source.keys() if isinstance(k, str)]
    if isinstance(source, types.ModuleType):
        names = getattr(source, "__all__", None)
        if names is not None:
            return list(names)
        return [k for k in vars(source) if not k.startswith("_")]
    if hasattr(source, "__dict__"):
        return [k for k in vars(source) if not k.startswith("_")]
    return []


def read_key(source: Any, key: str) -> Any:
    """Read key from a mapping-like or attribute-bearing source."""
    if isinstance(source, Mapping) or (hasattr(source, "keys") and hasattr(source, "get")):
        return source[key]
    return getattr(source, key)


def merge_all(target: ExportObject, source: Any) -> None:
    """
    Merge every enumerable key of source except ``default`` into target.

    Each key becomes a configurable live accessor, so later mutation of
    source is observable through target. A key that cannot be installed is
    skipped and the merge carries on.
    """
    for key in enumerable_keys(source):
        if key == DEFAULT_KEY:
            continue
        try:
            target.define(key, lambda key=key: read_key(source, key))
        except TypeError as e:
            logger.debug(f"Skipping export {key!r}: {e}")


def apply_export(target: ExportObject, shape: ExportShape) -> None:
    """Normalize an export shape into target."""
    if isinstance(shape, AssignmentExport):
        merge_all(target, shape.value)
        target[DEFAULT_KEY] = shape.value
    elif isinstance(shape, NamedExports):
        merge_all(target, shape.bindings)
    else:
        raise TypeError(f"Unknown export shape: {type(shape).__name__}")
