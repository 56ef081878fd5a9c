"""Tests for the named cache registry."""

import asyncio
import logging

import pytest

from dashboard_cache.application.services.cache_manager import CacheManager, calculate_hit_rate
from dashboard_cache.config.presets import CacheConfigs
from dashboard_cache.core.exceptions import InvalidPatternError
from dashboard_cache.core.value_objects.cache_config import CacheConfig


class TestNamedCaches:
    """Lazy creation and configuration."""

    def test_get_cache_uses_preset(self, cache_manager):
        named = cache_manager.get_cache("usersList")

        assert named.config == CacheConfigs.usersList
        assert named.store.max == 100

    def test_unknown_cache_uses_default_preset(self, cache_manager):
        named = cache_manager.get_cache("reports")

        assert named.config == CacheConfigs.default

    def test_first_configuration_wins(self, cache_manager, caplog):
        first = CacheConfig(max_entries=2, ttl_ms=1000)
        second = CacheConfig(max_entries=50, ttl_ms=5000)

        cache_manager.get_cache("custom", first)
        with caplog.at_level(logging.WARNING):
            named = cache_manager.get_cache("custom", second)

        assert named.config == first
        assert "already exists" in caplog.text

    def test_same_configuration_does_not_warn(self, cache_manager, caplog):
        config = CacheConfig(max_entries=2, ttl_ms=1000)

        cache_manager.get_cache("custom", config)
        with caplog.at_level(logging.WARNING):
            cache_manager.get_cache("custom", config)

        assert not [record for record in caplog.records if record.levelno >= logging.WARNING]

    def test_cache_names(self, cache_manager):
        cache_manager.set("users", "user:1", {"id": "1"})
        cache_manager.get("userStats", "users:stats")

        assert cache_manager.cache_names() == ["users", "userStats"]
        assert cache_manager.has_cache("users")
        assert not cache_manager.has_cache("performance")


class TestStatistics:
    """Hit, miss and set counters."""

    def test_hit_rate_arithmetic(self, cache_manager):
        cache_manager.set("users", "user:1", {"id": "1"})
        for _ in range(3):
            cache_manager.get("users", "user:1")
        cache_manager.get("users", "user:2")

        stats = cache_manager.get_stats("users")

        assert stats.hits == 3
        assert stats.misses == 1
        assert stats.sets == 1
        assert stats.hit_rate == 0.75
        assert stats.requests == 4

    def test_hit_rate_without_requests(self, cache_manager):
        cache_manager.get_cache("users")

        assert cache_manager.get_stats("users").hit_rate == 0.0

    def test_get_stats_for_unknown_cache(self, cache_manager):
        assert cache_manager.get_stats("missing") is None

    def test_get_stats_for_all_caches(self, cache_manager):
        cache_manager.set("users", "user:1", 1)
        cache_manager.set("performance", "performance:stats", 2)

        stats = cache_manager.get_stats()

        assert set(stats) == {"users", "performance"}
        assert stats["performance"].size == 1
        assert stats["performance"].to_dict()["max"] == 50

    def test_clear_keeps_counters(self, cache_manager):
        cache_manager.set("users", "user:1", 1)
        cache_manager.get("users", "user:1")

        cache_manager.clear("users")
        cache_manager.clear("users")

        stats = cache_manager.get_stats("users")
        assert stats.size == 0
        assert stats.hits == 1
        assert stats.sets == 1

    def test_expired_entry_counts_as_miss(self, cache_manager, clock):
        cache_manager.set("performance", "performance:stats", {"p95": 12})
        clock.advance(CacheConfigs.performance.ttl_ms)

        assert cache_manager.get("performance", "performance:stats") is None
        assert cache_manager.get_stats("performance").misses == 1

    @pytest.mark.parametrize(
        "hits, misses, expected",
        [(0, 0, 0.0), (1, 0, 1.0), (0, 4, 0.0), (1, 3, 0.25)],
    )
    def test_calculate_hit_rate(self, hits, misses, expected):
        assert calculate_hit_rate(hits, misses) == expected

    def test_stored_none_is_a_hit(self, cache_manager):
        cache_manager.set("users", "user:deleted", None)

        assert cache_manager.get("users", "user:deleted") is None
        assert cache_manager.contains("users", "user:deleted")
        assert not cache_manager.contains("users", "user:missing")

        stats = cache_manager.get_stats("users")
        assert stats.hits == 1
        assert stats.misses == 0


class TestInvalidation:
    """Delete, clear, pattern and namespace invalidation."""

    def test_invalidate_pattern(self, cache_manager):
        cache_manager.set("usersList", "users:list:role=Admin:page=1:limit=10", [])
        cache_manager.set("usersList", "users:list:role=Staff:page=1:limit=10", [])
        cache_manager.set("usersList", "users:stats", {})

        deleted = cache_manager.invalidate_pattern("usersList", "users:list:.*")

        assert deleted == 2
        assert cache_manager.get_cache("usersList").store.keys() == ["users:stats"]

    def test_pattern_is_searched_anywhere_in_key(self, cache_manager):
        cache_manager.set("users", "user:42", 1)
        cache_manager.set("users", "user:roles:42", 2)

        assert cache_manager.invalidate_pattern("users", "roles") == 1
        assert cache_manager.get("users", "user:42") == 1

    def test_invalidate_pattern_on_unknown_cache(self, cache_manager):
        assert cache_manager.invalidate_pattern("missing", ".*") == 0
        assert not cache_manager.has_cache("missing")

    def test_invalid_pattern_raises(self, cache_manager):
        cache_manager.set("users", "user:1", 1)

        with pytest.raises(InvalidPatternError) as exc_info:
            cache_manager.invalidate_pattern("users", "user:(")

        assert exc_info.value.pattern == "user:("
        assert isinstance(exc_info.value, ValueError)

    def test_invalidate_namespace(self, cache_manager):
        cache_manager.set("users", "user:1", 1)
        cache_manager.set("users", "user:roles:1", ["Admin"])

        assert cache_manager.invalidate_namespace("users", "user:roles") == 1
        assert cache_manager.get("users", "user:1") == 1

    def test_delete(self, cache_manager):
        cache_manager.set("users", "user:1", 1)

        assert cache_manager.delete("users", "user:1") is True
        assert cache_manager.delete("users", "user:1") is False
        assert cache_manager.delete("missing", "user:1") is False

    def test_clear_all(self, cache_manager):
        cache_manager.set("users", "user:1", 1)
        cache_manager.set("performance", "performance:stats", 2)

        cache_manager.clear_all()

        assert all(stats.size == 0 for stats in cache_manager.get_stats().values())


class TestReadThrough:
    """The cached decorator."""

    @pytest.mark.asyncio
    async def test_cached_calls_loader_once(self, cache_manager):
        calls = []

        @cache_manager.cached("users", key_builder=lambda user_id: f"user:{user_id}")
        async def load_user(user_id):
            calls.append(user_id)
            return {"id": user_id}

        assert await load_user("7") == {"id": "7"}
        assert await load_user("7") == {"id": "7"}
        assert calls == ["7"]

    @pytest.mark.asyncio
    async def test_cached_does_not_store_errors(self, cache_manager):
        @cache_manager.cached("users", key_builder=lambda user_id: f"user:{user_id}")
        async def load_user(user_id):
            raise LookupError(user_id)

        with pytest.raises(LookupError):
            await load_user("7")

        assert cache_manager.get_stats("users").sets == 0

    @pytest.mark.asyncio
    async def test_cached_stores_none_results(self, cache_manager):
        calls = []

        @cache_manager.cached("users", key_builder=lambda user_id: f"user:{user_id}")
        async def find_user(user_id):
            calls.append(user_id)
            return None

        assert await find_user("404") is None
        assert await find_user("404") is None
        assert calls == ["404"]
        assert cache_manager.get_stats("users").hits == 1


class TestSweeper:
    """Background expiry sweep."""

    @pytest.mark.asyncio
    async def test_sweeper_purges_expired_entries(self, clock):
        manager = CacheManager(clock=clock)
        manager.set("performance", "performance:stats", 1)
        clock.advance(CacheConfigs.performance.ttl_ms)

        await manager.start_sweeper(0.01)
        await asyncio.sleep(0.05)
        await manager.stop_sweeper()

        assert manager.get_cache("performance").store.expirations == 1

    @pytest.mark.asyncio
    async def test_stop_sweeper_without_start(self, cache_manager):
        await cache_manager.stop_sweeper()
