"""Tests for the direct invalidation helpers."""

import pytest

from dashboard_cache.application.services.cache_invalidator import CacheInvalidator
from dashboard_cache.core.value_objects.cache_key import CacheKeyGenerator


@pytest.fixture
def invalidator(cache_manager):
    return CacheInvalidator(cache_manager)


@pytest.fixture
def populated(cache_manager):
    cache_manager.set("users", CacheKeyGenerator.user_by_id("1"), {"id": "1"})
    cache_manager.set("users", CacheKeyGenerator.user_roles("1"), ["Admin"])
    cache_manager.set("users", CacheKeyGenerator.user_by_id("2"), {"id": "2"})
    cache_manager.set("usersList", CacheKeyGenerator.users_list({"role": "Admin"}, 1, 10), [])
    cache_manager.set("usersList", CacheKeyGenerator.users_list({"status": "Active"}, 1, 10), [])
    cache_manager.set("userStats", CacheKeyGenerator.user_stats(), {"total": 2})
    cache_manager.set("performance", CacheKeyGenerator.performance_stats(), {})
    cache_manager.set("dbStatus", CacheKeyGenerator.db_status(), {"ok": True})
    return cache_manager


class TestCacheInvalidator:
    """Immediate invalidation."""

    def test_invalidate_user(self, invalidator, populated):
        invalidator.invalidate_user("1")

        assert populated.get("users", "user:1") is None
        assert populated.get("users", "user:roles:1") is None
        assert populated.get("users", "user:2") == {"id": "2"}
        assert populated.get_stats("usersList").size == 0
        assert populated.get_stats("userStats").size == 0

    def test_invalidate_user_lists_by_filter(self, invalidator, populated):
        invalidator.invalidate_user_lists(["role"])

        assert populated.get_cache("usersList").store.keys() == ["users:list:status=Active:page=1:limit=10"]
        assert populated.get_stats("userStats").size == 0

    def test_invalidate_all_user_lists(self, invalidator, populated):
        invalidator.invalidate_user_lists()

        assert populated.get_stats("usersList").size == 0

    def test_invalidate_all_users(self, invalidator, populated):
        invalidator.invalidate_all_users()

        sizes = {name: stats.size for name, stats in populated.get_stats().items()}
        assert sizes == {
            "users": 0,
            "usersList": 0,
            "userStats": 0,
            "performance": 1,
            "dbStatus": 1,
        }

    def test_invalidate_performance_and_db_status(self, invalidator, populated):
        invalidator.invalidate_performance()
        invalidator.invalidate_db_status()

        assert populated.get_stats("performance").size == 0
        assert populated.get_stats("dbStatus").size == 0
        assert populated.get_stats("users").size == 3
