"""Unit tests for eolscan.cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from eolscan.cache import CacheStats, ResponseCache

if TYPE_CHECKING:
    from tests.conftest import FakeClock


class TestResponseCache:
    def test_get_after_set_returns_value(self, cache: ResponseCache) -> None:
        cache.set("https://example.com/a", ["python"])
        assert cache.get("https://example.com/a") == ["python"]

    def test_get_missing_returns_none(self, cache: ResponseCache) -> None:
        assert cache.get("https://example.com/missing") is None

    def test_entry_still_fresh_at_ttl_boundary(
        self, cache: ResponseCache, clock: FakeClock
    ) -> None:
        cache.set("k", "v")
        clock.advance(60)
        assert cache.get("k") == "v"

    def test_expired_entry_returns_none_and_is_evicted(
        self, cache: ResponseCache, clock: FakeClock
    ) -> None:
        cache.set("k", "v")
        clock.advance(61)
        assert cache.get("k") is None
        assert cache.stats() == CacheStats(size=0, keys=[])

    def test_expiry_only_evicts_the_stale_key(
        self, cache: ResponseCache, clock: FakeClock
    ) -> None:
        cache.set("old", 1)
        clock.advance(30)
        cache.set("new", 2)
        clock.advance(31)
        assert cache.get("old") is None
        assert cache.get("new") == 2
        assert cache.stats().keys == ["new"]

    def test_set_replaces_and_refreshes(self, cache: ResponseCache, clock: FakeClock) -> None:
        cache.set("k", "first")
        clock.advance(50)
        cache.set("k", "second")
        clock.advance(50)
        assert cache.get("k") == "second"

    def test_falsy_values_are_cached(self, cache: ResponseCache) -> None:
        cache.set("empty", [])
        assert cache.get("empty") == []

    def test_clear(self, cache: ResponseCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert cache.stats().size == 0
        assert cache.get("a") is None

    def test_stats_lists_keys(self, cache: ResponseCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        stats = cache.stats()
        assert stats.size == 2
        assert stats.keys == ["a", "b"]

    def test_default_clock_is_monotonic(self) -> None:
        cache = ResponseCache(3600)
        cache.set("k", "v")
        assert cache.get("k") == "v"
