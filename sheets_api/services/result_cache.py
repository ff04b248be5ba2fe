"""
Result Cache
============

In-memory store of parsed sheets keyed by (spreadsheet_id, sheet_gid).

Provides:
- Lookup without read-time eviction (freshness is the caller's decision)
- Wholesale replacement stamped with the injected clock
- Single-key invalidation and full clear

One instance is constructed per process and passed to its consumers.
Each operation holds an internal lock, so a threaded host sees every
call as atomic.

Stored records are read-only mapping views. Entries are replaced, never
edited; callers that need mutable dicts take a copy with ``as_dicts()``.
"""

import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, NamedTuple

from sheets_api.parsers.record_assembler import Record
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]
FrozenRecord = Mapping[str, Any]


def freeze(value: Any) -> Any:
    """Read-only view of ``value``, nested mappings included."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    return value


def thaw(value: Any) -> Any:
    """Plain dict copy of a frozen value."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    return value


class CacheKey(NamedTuple):
    """Source key: spreadsheet document id and sheet tab id."""

    spreadsheet_id: str
    sheet_gid: str

    def __str__(self) -> str:
        return f"{self.spreadsheet_id}-{self.sheet_gid}"


@dataclass(frozen=True)
class CacheEntry:
    """
    Parsed records for one sheet and the time they were stored.

    Attributes:
        records: Read-only records in source order
        fetched_at: Clock reading (seconds) when the entry was stored
    """

    records: tuple[FrozenRecord, ...]
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def as_dicts(self) -> list[Record]:
        """Mutable, JSON-ready copies of the records."""
        return [thaw(record) for record in self.records]


class ResultCache:
    """
    Keyed store of CacheEntry values.

    Usage:
        cache = ResultCache()
        cache.set(CacheKey("doc", "0"), records)
        entry = cache.get(CacheKey("doc", "0"))
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for ``key`` if present, fresh or not."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: CacheKey, records: Iterable[Record]) -> CacheEntry:
        """Replace any entry for ``key`` with ``records`` stamped now."""
        entry = CacheEntry(
            records=tuple(freeze(record) for record in records),
            fetched_at=self._clock(),
        )
        with self._lock:
            self._entries[key] = entry
        logger.debug("cache_entry_stored", key=str(key), records=len(entry.records))
        return entry

    def delete(self, key: CacheKey) -> bool:
        """Remove the entry for ``key``; True if one was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("cache_entry_deleted", key=str(key))
        return removed

    def clear(self) -> int:
        """Remove every entry and return how many there were."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("cache_cleared", entries=count)
        return count

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[CacheKey]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
