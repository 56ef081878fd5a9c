"""API response cache.

ONLY whole-response HTTP caching - stores successful JSON responses of GET
requests in the ``apiResponses`` named cache and replays them on later hits.

Each endpoint picks a TTL strategy from ``ApiCacheConfigs``; the strategy
also drives the ``Cache-Control`` header sent to clients.
"""

import functools
import json
import logging
import re
from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Set, Tuple

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..application.services.cache_manager import CacheManager
from ..core.value_objects.cache_config import CacheConfig
from ..core.value_objects.cache_key import CacheKeyGenerator

logger = logging.getLogger(__name__)

API_RESPONSES_CACHE = "apiResponses"

# Re-computed from the stored body when a cached response is replayed
_STRIPPED_HEADERS = frozenset({"content-length", "content-encoding", "transfer-encoding"})


@dataclass(frozen=True)
class ApiCacheConfig:
    """Caching strategy of one endpoint.

    Attributes:
        ttl_ms: Lifetime of the cached response in milliseconds
        max_age: ``Cache-Control`` max-age in seconds
        stale_while_revalidate: ``Cache-Control`` stale-while-revalidate in seconds
        cache_key_pattern: Fixed cache key used instead of the URL derived one
        skip_cache: Never read or write the cache
        tags: Labels the response can later be invalidated by
    """

    ttl_ms: int
    max_age: int
    stale_while_revalidate: int
    cache_key_pattern: Optional[str] = None
    skip_cache: bool = False
    tags: Tuple[str, ...] = ()

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.max_age}, stale-while-revalidate={self.stale_while_revalidate}"

    def with_options(self, **changes: Any) -> "ApiCacheConfig":
        """Copy of the strategy with some fields replaced."""
        if "tags" in changes:
            changes["tags"] = tuple(changes["tags"] or ())
        return replace(self, **changes)


class ApiCacheConfigs:
    """Predefined TTL strategies."""

    # Ultra-fast responses for static data
    static = ApiCacheConfig(ttl_ms=60 * 60 * 1000, max_age=3600, stale_while_revalidate=7200)

    # Frequently accessed data
    frequent = ApiCacheConfig(ttl_ms=5 * 60 * 1000, max_age=300, stale_while_revalidate=600)

    # Regular data
    standard = ApiCacheConfig(ttl_ms=2 * 60 * 1000, max_age=120, stale_while_revalidate=240)

    # Dynamic data
    dynamic = ApiCacheConfig(ttl_ms=30 * 1000, max_age=30, stale_while_revalidate=60)

    # Real-time data, minimal caching
    realtime = ApiCacheConfig(ttl_ms=5 * 1000, max_age=5, stale_while_revalidate=10)


EndpointCacheConfigs: Dict[str, ApiCacheConfig] = {
    "/api/users": ApiCacheConfigs.standard,
    "/api/users/stats": ApiCacheConfigs.frequent,
    "/api/performance/query-stats": ApiCacheConfigs.dynamic,
    "/api/database/status": ApiCacheConfigs.frequent,
    "/api/cache/stats": ApiCacheConfigs.realtime,
}


def get_cache_config_for_path(path: str) -> ApiCacheConfig:
    """Strategy registered for a path, the standard one otherwise."""
    return EndpointCacheConfigs.get(path, ApiCacheConfigs.standard)


class ApiResponseCache:
    """Whole-response cache on top of a CacheManager.

    Cached payload: ``{body, status, headers, timestamp, tags}``.
    """

    def __init__(self, cache_manager: CacheManager, max_entries: int = 500):
        """Initialize API response cache.

        Args:
            cache_manager: Owner of the ``apiResponses`` cache
            max_entries: Capacity of the ``apiResponses`` cache
        """
        self._cache_manager = cache_manager
        self._cache_config = CacheConfig(
            max_entries=max_entries,
            ttl_ms=ApiCacheConfigs.standard.ttl_ms,
            refresh_ttl_on_access=True,
            allow_stale=True,
        )
        self._tag_index: Dict[str, Set[str]] = defaultdict(set)

    @property
    def cache_name(self) -> str:
        return API_RESPONSES_CACHE

    @staticmethod
    def generate_cache_key(request: Request, custom_pattern: Optional[str] = None) -> str:
        """``api:<path>[:<sorted query>]``, or the custom key when given."""
        if custom_pattern:
            return custom_pattern
        return CacheKeyGenerator.api_response(request.url.path, request.query_params.multi_items())

    @staticmethod
    def should_cache(request: Request, response: Response) -> bool:
        """Only successful GET responses without cookies or private markers."""
        if request.method != "GET":
            return False

        if not 200 <= response.status_code < 300:
            return False

        if "set-cookie" in response.headers:
            return False

        cache_control = response.headers.get("cache-control", "")
        if "private" in cache_control or "no-cache" in cache_control:
            return False

        return True

    def get_cached_response(self, request: Request, config: ApiCacheConfig) -> Optional[Response]:
        """Replay a cached response, or None on a miss."""
        if config.skip_cache:
            return None

        cache_key = self.generate_cache_key(request, config.cache_key_pattern)
        cached_data = self._cache_manager.get(API_RESPONSES_CACHE, cache_key, self._cache_config)
        if cached_data is None:
            return None

        logger.debug(f"API cache hit {request.url}")

        headers = dict(cached_data["headers"])
        headers.update(
            {
                "content-type": "application/json",
                "x-cache": "HIT",
                "x-cache-key": cache_key,
                "cache-control": config.cache_control,
            }
        )
        return JSONResponse(
            content=cached_data["body"],
            status_code=cached_data["status"],
            headers=headers,
        )

    def cache_response(
        self,
        request: Request,
        response: Response,
        config: ApiCacheConfig,
        body: Optional[bytes] = None,
    ) -> bool:
        """Store a response when it is cacheable.

        Args:
            request: Request the response answers
            response: Response to store
            config: Endpoint strategy
            body: Raw body, read from ``response.body`` when omitted

        Returns:
            Whether the response was stored. Bodies that are not JSON are
            logged and skipped.
        """
        if config.skip_cache or not self.should_cache(request, response):
            return False

        try:
            raw_body = body if body is not None else response.body
            response_body = json.loads(raw_body)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Failed to cache response for {request.url.path}: {e}")
            return False

        cache_key = self.generate_cache_key(request, config.cache_key_pattern)
        cache_data = {
            "body": response_body,
            "status": response.status_code,
            "headers": {
                name: value
                for name, value in response.headers.items()
                if name.lower() not in _STRIPPED_HEADERS
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tags": list(config.tags),
        }

        self._cache_manager.set(
            API_RESPONSES_CACHE,
            cache_key,
            cache_data,
            config=self._cache_config,
            ttl_ms=config.ttl_ms,
        )
        for tag in config.tags:
            self._tag_index[tag].add(cache_key)
        # A tag never holds more live keys than the cache; twice that is stale
        limit = 2 * self._capacity()
        if any(len(self._tag_index[tag]) > limit for tag in config.tags):
            self._prune_tag_index()

        logger.debug(f"API cache set {request.url} (ttl={config.ttl_ms}ms)")
        return True

    def invalidate_by_pattern(self, pattern: str) -> int:
        return self._cache_manager.invalidate_pattern(API_RESPONSES_CACHE, pattern)

    def invalidate_by_tags(self, tags: Iterable[str]) -> int:
        """Drop responses stored with any of the tags.

        Keys recorded under a tag are deleted first; keys merely containing
        the tag text are matched afterwards.
        """
        deleted_count = 0
        for tag in tags:
            for cache_key in self._tag_index.pop(tag, set()):
                if self._cache_manager.delete(API_RESPONSES_CACHE, cache_key):
                    deleted_count += 1
            deleted_count += self.invalidate_by_pattern(f".*{re.escape(tag)}.*")

        self._prune_tag_index()
        return deleted_count

    def tagged_keys(self, tag: str) -> Set[str]:
        self._prune_tag_index()
        return set(self._tag_index.get(tag, ()))

    @property
    def indexed_key_count(self) -> int:
        """Keys currently held by the tag index, counted once per tag."""
        return sum(len(keys) for keys in self._tag_index.values())

    def _capacity(self) -> int:
        return self._cache_manager.get_cache(API_RESPONSES_CACHE, self._cache_config).store.max

    def _prune_tag_index(self) -> None:
        """Forget keys that expired, were evicted or were invalidated."""
        named = self._cache_manager.get_cache(API_RESPONSES_CACHE, self._cache_config)
        live_keys = set(named.store.keys())
        for tag in list(self._tag_index):
            self._tag_index[tag] &= live_keys
            if not self._tag_index[tag]:
                del self._tag_index[tag]


def _find_request(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Request:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    raise TypeError("with_api_cache handlers must receive the Request")


def _resolve_api_cache(request: Request) -> ApiResponseCache:
    return request.app.state.cache_service.api_cache


def with_api_cache(
    config: ApiCacheConfig,
    api_cache: Optional[ApiResponseCache] = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Response]]]:
    """Cache the responses of an async route handler.

    The handler must take the ``Request``. Without an explicit ``api_cache``
    the cache of the service stored on ``app.state.cache_service`` is used.
    Plain return values are wrapped in a ``JSONResponse``.
    """

    def decorator(handler: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Response]]:
        @functools.wraps(handler)
        async def wrapper(*args: Any, **kwargs: Any) -> Response:
            request = _find_request(args, kwargs)
            cache = api_cache or _resolve_api_cache(request)

            cached_response = cache.get_cached_response(request, config)
            if cached_response is not None:
                return cached_response

            response = await handler(*args, **kwargs)
            if not isinstance(response, Response):
                response = JSONResponse(content=jsonable_encoder(response))

            cache.cache_response(request, response, config)

            response.headers["x-cache"] = "MISS"
            response.headers["cache-control"] = config.cache_control
            return response

        return wrapper

    return decorator
