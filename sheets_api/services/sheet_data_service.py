"""
Sheet Data Service
==================

Pull-through access to parsed sheets.

A request for a sheet is served from the ResultCache while the entry is
younger than the TTL. On a miss or a stale entry the service fetches fresh
CSV text from its SheetSource, parses it and replaces the cache entry
before answering. A failed fetch propagates to the caller and leaves any
existing entry untouched, stale or not. There is no automatic retry here.

Concurrent misses for the same key are coalesced: the second caller waits
on a per-key lock and then finds the entry the first caller stored.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sheets_api.parsers.csv_parser import parse_csv
from sheets_api.parsers.header_mapper import HeaderMapper
from sheets_api.services.result_cache import (
    CacheEntry,
    CacheKey,
    Clock,
    FrozenRecord,
    ResultCache,
)
from sheets_api.services.sheet_source import SheetSource
from sheets_api.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


def _isoformat(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class SheetLoadResult:
    """
    Records served for one request.

    Attributes:
        key: Source key the records belong to
        entry: Cache entry the records were served from
        from_cache: True when no fetch was needed
        characters: Length of the fetched text, None on a cache hit
    """

    key: CacheKey
    entry: CacheEntry
    from_cache: bool
    characters: int | None = None

    @property
    def records(self) -> tuple[FrozenRecord, ...]:
        return self.entry.records

    @property
    def total_rows(self) -> int:
        return len(self.entry.records)


class SheetDataService:
    """
    Fetch-or-load orchestrator over ResultCache and SheetSource.

    Usage:
        service = SheetDataService(ResultCache(), GoogleSheetsCsvSource())
        result = await service.get_records(CacheKey("doc", "0"))
        result.records
    """

    def __init__(
        self,
        cache: ResultCache,
        source: SheetSource,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock | None = None,
        header_mapper: HeaderMapper | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            cache: Shared result cache
            source: Fetch capability for raw CSV text
            ttl_seconds: Age after which an entry is stale
            clock: Time source; defaults to the cache's clock
            header_mapper: Header rules used for every parse
        """
        self._cache = cache
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock or cache.clock
        self._header_mapper = header_mapper or HeaderMapper()
        self._locks: dict[CacheKey, asyncio.Lock] = {}
        self._waiters: dict[CacheKey, int] = {}

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def source(self) -> SheetSource:
        return self._source

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def is_fresh(self, entry: CacheEntry) -> bool:
        return entry.age(self._clock()) < self._ttl

    @asynccontextmanager
    async def _key_lock(self, key: CacheKey) -> AsyncIterator[None]:
        """
        Hold the per-key lock.

        The lock lives in ``_locks`` only while some caller holds or waits
        on it, so keys that never cache anything leave nothing behind.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    async def _load(self, key: CacheKey) -> SheetLoadResult:
        text = await self._source.fetch(key)
        records = parse_csv(text, self._header_mapper)
        entry = self._cache.set(key, records)
        logger.info(
            "sheet_loaded",
            key=str(key),
            characters=len(text),
            records=len(entry.records),
        )
        return SheetLoadResult(key=key, entry=entry, from_cache=False, characters=len(text))

    async def get_records(self, key: CacheKey) -> SheetLoadResult:
        """
        Return records for ``key``, refreshing a missing or stale entry.

        Raises:
            SourceError: When a needed fetch fails; the cache is unchanged
        """
        entry = self._cache.get(key)
        if entry is not None and self.is_fresh(entry):
            logger.debug("cache_hit", key=str(key))
            return SheetLoadResult(key=key, entry=entry, from_cache=True)

        async with self._key_lock(key):
            entry = self._cache.get(key)
            if entry is not None and self.is_fresh(entry):
                logger.debug("cache_hit_after_wait", key=str(key))
                return SheetLoadResult(key=key, entry=entry, from_cache=True)

            logger.info("cache_miss" if entry is None else "cache_stale", key=str(key))
            return await self._load(key)

    async def refresh(self, key: CacheKey) -> SheetLoadResult:
        """
        Fetch and reparse ``key`` regardless of freshness.

        Raises:
            SourceError: When the fetch fails; the cache is unchanged
        """
        async with self._key_lock(key):
            logger.info("sheet_refresh_requested", key=str(key))
            return await self._load(key)

    def invalidate(self, key: CacheKey) -> bool:
        return self._cache.delete(key)

    def clear(self) -> int:
        return self._cache.clear()

    def describe(self, key: CacheKey) -> dict[str, Any]:
        """Cache status of ``key`` for the info endpoint."""
        entry = self._cache.get(key)
        return {
            "hasData": entry is not None,
            "isFresh": entry is not None and self.is_fresh(entry),
            "rowCount": len(entry.records) if entry else 0,
            "lastLoaded": _isoformat(entry.fetched_at) if entry else None,
            "ttlSeconds": self._ttl,
            "totalCachedSheets": self._cache.size(),
        }
