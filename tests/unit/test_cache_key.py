"""Tests for cache key generation."""

import pytest

from dashboard_cache.core.value_objects.cache_key import CacheKeyGenerator


class TestCacheKeyGenerator:
    """Key shapes used by the invalidation rules."""

    def test_users_list_key(self):
        key = CacheKeyGenerator.users_list({"role": "Admin", "status": "Active"}, 2, 25)

        assert key == "users:list:role=Admin&status=Active:page=2:limit=25"

    def test_users_list_filter_order_does_not_matter(self):
        first = CacheKeyGenerator.users_list({"status": "Active", "role": "Admin"}, 1, 10)
        second = CacheKeyGenerator.users_list({"role": "Admin", "status": "Active"}, 1, 10)

        assert first == second

    def test_users_list_without_filters(self):
        assert CacheKeyGenerator.users_list({}, 1, 10) == "users:list::page=1:limit=10"
        assert CacheKeyGenerator.users_list(None, 1, 10) == "users:list::page=1:limit=10"

    @pytest.mark.parametrize(
        "value, rendered",
        [(None, "null"), (True, "true"), (False, "false"), (["a", "b"], "a,b"), (3, "3")],
    )
    def test_filter_values(self, value, rendered):
        assert CacheKeyGenerator.filter_string({"f": value}) == f"f={rendered}"

    def test_entity_keys(self):
        assert CacheKeyGenerator.user_by_id("42") == "user:42"
        assert CacheKeyGenerator.user_stats() == "users:stats"
        assert CacheKeyGenerator.user_roles("42") == "user:roles:42"
        assert CacheKeyGenerator.performance_stats() == "performance:stats"
        assert CacheKeyGenerator.db_status() == "db:status"

    def test_api_response_key_sorts_query(self):
        key = CacheKeyGenerator.api_response("/api/users", [("page", "1"), ("limit", "10")])

        assert key == "api:/api/users:limit=10&page=1"
        assert CacheKeyGenerator.api_response("/api/users") == "api:/api/users"

    @pytest.mark.parametrize(
        "key, namespace",
        [
            ("users:list:role=Admin:page=1:limit=10", "users:list"),
            ("users:stats", "users:stats"),
            ("user:roles:42", "user:roles"),
            ("user:42", "user"),
            ("performance:stats", "performance"),
            ("db:status", "db"),
            ("api:/api/users", "api"),
            ("reports:daily", "reports"),
        ],
    )
    def test_namespace_of(self, key, namespace):
        assert CacheKeyGenerator.namespace_of(key) == namespace
