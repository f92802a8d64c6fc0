"""
vnode Module Cache

Per-runner memo of module loads, keyed by resolved filesystem path.

Key classes:
- CacheRecord: What is known about one resolved path
- ModuleCache: Path -> CacheRecord mapping with merge-in updates
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterator, Optional


@dataclass
class CacheRecord:
    """
    Cache entry for one resolved path.

    Tracks:
    - pending: shared task for the in-flight (or finished) load
    - source_text: transformed code once fetched
    - exports: export object once execution has started
    """
    pending: Optional[asyncio.Future] = None
    source_text: Optional[str] = None
    exports: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pending": self.pending is not None,
            "done": self.pending is not None and self.pending.done(),
            "has_source": self.source_text is not None,
            "exports": None if self.exports is None else sorted(_keys(self.exports)),
        }


def _keys(exports: Any):
    keys = getattr(exports, "keys", None)
    if callable(keys):
        return [str(k) for k in keys()]
    return [k for k in dir(exports) if not k.startswith("_")]


_FIELDS = {f.name for f in fields(CacheRecord)}


class ModuleCache:
    """
    Mapping from resolved path to CacheRecord.

    Records are created lazily and fields are merged in; nothing is evicted.
    """

    def __init__(self, records: Dict[str, CacheRecord] = None):
        self._records: Dict[str, CacheRecord] = dict(records or {})

    def get(self, path: str) -> Optional[CacheRecord]:
        return self._records.get(path)

    def set(self, path: str, **values: Any) -> CacheRecord:
        """Create the record for path if needed and merge values into it."""
        unknown = set(values) - _FIELDS
        if unknown:
            raise KeyError(f"Unknown cache record fields: {sorted(unknown)}")

        record = self._records.get(path)
        if record is None:
            record = CacheRecord(**values)
            self._records[path] = record
        else:
            for name, value in values.items():
                setattr(record, name, value)
        return record

    def __contains__(self, path: str) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def to_dict(self) -> Dict[str, Any]:
        return {path: record.to_dict() for path, record in self._records.items()}
