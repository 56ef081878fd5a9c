"""End-to-end cache flows across the manager, invalidation engine and HTTP layer."""

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from dashboard_cache.app import create_app
from dashboard_cache.core.entities.invalidation_event import InvalidationEvent
from dashboard_cache.core.value_objects.cache_config import CacheConfig
from dashboard_cache.core.value_objects.cache_key import CacheKeyGenerator
from dashboard_cache.core.value_objects.event_kind import EventKind

USERS = [{"id": "u1", "role": "Admin"}, {"id": "u2", "role": "Admin"}]


class TestUsersListScenario:
    """A cached user list disappears once a user changes."""

    @pytest.mark.asyncio
    async def test_user_update_drops_cached_list(self, cache_service):
        manager = cache_service.cache_manager
        config = CacheConfig(max_entries=100, ttl_ms=60_000)
        key = "users:list:role=Admin:page=1"

        manager.set("usersList", key, USERS, config)

        assert manager.get("usersList", key, config) == USERS
        assert manager.get_stats("usersList").hits == 1

        cache_service.invalidation_utils.invalidate_user("u1", "update")
        await cache_service.invalidation_engine.wait_until_idle()

        assert manager.get("usersList", key, config) is None
        assert manager.get_stats("usersList").misses == 1

        entry = cache_service.invalidation_monitor.get_recent_events()[0]
        assert entry.event_key == "user:update"
        assert entry.entity_id == "u1"
        assert entry.items_invalidated == 1

    @pytest.mark.asyncio
    async def test_user_create_keeps_single_user_entries(self, cache_service):
        manager = cache_service.cache_manager
        manager.set("users", CacheKeyGenerator.user_by_id("42"), {"id": "42"})
        manager.set("usersList", CacheKeyGenerator.users_list({"role": "Admin"}, 1, 10), USERS)
        manager.set("usersList", CacheKeyGenerator.users_list({"role": "User"}, 1, 10), [])
        manager.set("userStats", CacheKeyGenerator.user_stats(), {"total": 2})

        cache_service.invalidation_utils.invalidate_user("99", "create")
        await cache_service.invalidation_engine.wait_until_idle()

        assert manager.get_stats("usersList").size == 0
        assert manager.get_stats("userStats").size == 0
        assert manager.get("users", "user:42") == {"id": "42"}

        stats = cache_service.invalidation_monitor.get_statistics()
        assert stats["total_events"] == 1
        assert stats["items_invalidated"] == 3


class TestHttpScenario:
    """Cached HTTP responses follow data changes."""

    @pytest.fixture
    def app(self, cache_service):
        app = create_app(cache_service)
        app.state.list_calls = 0

        @app.get("/api/users")
        async def list_users(request: Request):
            request.app.state.list_calls += 1
            return {"data": USERS}

        @app.put("/api/users/{user_id}")
        async def update_user(user_id: str):
            cache_service.invalidation_utils.invalidate_user(user_id, "update")
            await cache_service.invalidation_engine.invalidate_immediate(
                InvalidationEvent.create(EventKind.API_RESPONSE_CHANGE, source="api")
            )
            return {"id": user_id}

        return app

    def test_update_invalidates_cached_list(self, app, cache_service):
        with TestClient(app) as client:
            assert client.get("/api/users").headers["x-cache"] == "MISS"
            assert client.get("/api/users").headers["x-cache"] == "HIT"

            assert client.put("/api/users/u1").status_code == 200

            response = client.get("/api/users")

        assert response.headers["x-cache"] == "MISS"
        assert app.state.list_calls == 2
        assert cache_service.started is False

    def test_stats_endpoint_reports_http_cache(self, app):
        @app.middleware("http")
        async def authenticate(request, call_next):
            request.state.user_role = "SuperAdmin"
            return await call_next(request)

        with TestClient(app) as client:
            client.get("/api/users")
            client.get("/api/users")
            body = client.get("/cache/stats").json()

        api_responses = next(cache for cache in body["caches"] if cache["name"] == "apiResponses")
        assert api_responses["size"] == 1
        assert api_responses["max"] == 500
        assert api_responses["hitRate"] == 0.5
