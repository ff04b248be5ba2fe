"""
Unit tests for ResultCache.

Each test builds its own cache instance with a manual clock.
"""

import pytest

from sheets_api.services.result_cache import CacheEntry, CacheKey, ResultCache


class TestCacheKey:
    """Tests for CacheKey value semantics."""

    def test_compared_by_value(self) -> None:
        assert CacheKey("doc", "1") == CacheKey("doc", "1")
        assert CacheKey("doc", "1") != CacheKey("doc", "2")
        assert hash(CacheKey("doc", "1")) == hash(CacheKey("doc", "1"))

    def test_str(self) -> None:
        assert str(CacheKey("doc", "7")) == "doc-7"


class TestResultCache:
    """Tests for ResultCache operations."""

    def test_get_missing(self, cache: ResultCache) -> None:
        assert cache.get(CacheKey("doc", "1")) is None

    def test_set_then_get(self, cache: ResultCache, clock) -> None:
        """Entry is stamped with the clock reading at set time."""
        records = [{"title": "a", "rowNumber": 1}]
        cache.set(CacheKey("doc", "1"), records)

        entry = cache.get(CacheKey("doc", "1"))
        assert isinstance(entry, CacheEntry)
        assert entry.as_dicts() == records
        assert entry.fetched_at == clock.now

    def test_set_replaces_wholesale(self, cache: ResultCache, clock) -> None:
        key = CacheKey("doc", "1")
        first = cache.set(key, [{"rowNumber": 1}])
        clock.advance(10)
        second = cache.set(key, [{"rowNumber": 1}, {"rowNumber": 2}])

        assert cache.get(key) is second
        assert first.as_dicts() == [{"rowNumber": 1}]
        assert second.fetched_at == first.fetched_at + 10
        assert cache.size() == 1

    def test_stale_entry_not_evicted_on_read(self, cache: ResultCache, clock) -> None:
        key = CacheKey("doc", "1")
        entry = cache.set(key, [])
        clock.advance(10_000)

        assert cache.get(key) is entry
        assert entry.age(clock()) == 10_000

    def test_delete(self, cache: ResultCache) -> None:
        key = CacheKey("doc", "1")
        cache.set(key, [])

        assert cache.delete(key) is True
        assert cache.delete(key) is False
        assert cache.get(key) is None

    def test_clear_returns_count(self, cache: ResultCache) -> None:
        cache.set(CacheKey("doc", "1"), [])
        cache.set(CacheKey("doc", "2"), [])
        cache.set(CacheKey("other", "1"), [])

        assert cache.clear() == 3
        assert cache.size() == 0
        assert cache.clear() == 0

    def test_keys_and_membership(self, cache: ResultCache) -> None:
        cache.set(CacheKey("doc", "1"), [])
        cache.set(CacheKey("doc", "2"), [])

        assert set(cache.keys()) == {CacheKey("doc", "1"), CacheKey("doc", "2")}
        assert CacheKey("doc", "1") in cache
        assert CacheKey("doc", "3") not in cache
        assert len(cache) == 2

    def test_isolated_instances(self) -> None:
        first, second = ResultCache(), ResultCache()
        first.set(CacheKey("doc", "1"), [])
        assert second.size() == 0


class TestReadOnlyRecords:
    """Stored records cannot be edited through the entry."""

    def test_record_assignment_rejected(self, cache: ResultCache) -> None:
        entry = cache.set(CacheKey("doc", "1"), [{"title": "Shirt", "rowNumber": 1}])

        with pytest.raises(TypeError):
            entry.records[0]["title"] = "Hat"
        assert cache.get(CacheKey("doc", "1")).records[0]["title"] == "Shirt"

    def test_nested_price_is_read_only(self, cache: ResultCache) -> None:
        price = {"amount": "100", "shipping": "", "display": "100"}
        entry = cache.set(CacheKey("doc", "1"), [{"price100_300": price, "rowNumber": 1}])

        with pytest.raises(TypeError):
            entry.records[0]["price100_300"]["amount"] = "0"

    def test_source_dicts_detached(self, cache: ResultCache) -> None:
        records = [{"title": "Shirt", "rowNumber": 1}]
        entry = cache.set(CacheKey("doc", "1"), records)

        records[0]["title"] = "Hat"
        assert entry.records[0]["title"] == "Shirt"

    def test_as_dicts_returns_independent_copies(self, cache: ResultCache) -> None:
        entry = cache.set(
            CacheKey("doc", "1"),
            [{"price100_300": {"amount": "100"}, "rowNumber": 1}],
        )

        copies = entry.as_dicts()
        copies[0]["price100_300"]["amount"] = "0"

        assert type(copies[0]) is dict
        assert entry.as_dicts() == [{"price100_300": {"amount": "100"}, "rowNumber": 1}]
