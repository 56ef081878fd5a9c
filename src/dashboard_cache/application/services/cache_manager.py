"""Cache manager service.

Registry of named caches. Each named cache wraps a BoundedTTLCache and
tracks hit, miss and set counters for monitoring.
"""

import asyncio
import functools
import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from ...config.presets import CacheConfigs
from ...core.exceptions import InvalidPatternError
from ...core.value_objects.cache_config import CacheConfig
from ...infrastructure.bounded_ttl_cache import BoundedTTLCache, Clock

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Distinguishes a miss from a stored None
_MISSING = object()


@dataclass
class NamedCache:
    """A registered cache partition with its lifetime counters."""

    name: str
    config: CacheConfig
    store: BoundedTTLCache
    hits: int = 0
    misses: int = 0
    sets: int = 0


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time statistics of one named cache."""

    name: str
    size: int
    max: int
    hits: int
    misses: int
    sets: int
    hit_rate: float
    evictions: int = 0
    expirations: int = 0

    @property
    def requests(self) -> int:
        return self.hits + self.misses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "max": self.max,
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "hit_rate": self.hit_rate,
            "evictions": self.evictions,
            "expirations": self.expirations,
        }


def calculate_hit_rate(hits: int, misses: int) -> float:
    """hits / (hits + misses), or 0.0 before the first request."""
    total = hits + misses
    return hits / total if total > 0 else 0.0


class CacheManager:
    """Named cache registry.

    Features:
    - Lazy creation of named caches (first configuration wins)
    - Hit/miss/set statistics per cache
    - Regex and namespace based invalidation
    - Background sweep of expired entries
    - Read-through decorator for async functions
    """

    def __init__(self, clock: Optional[Clock] = None):
        """Initialize cache manager.

        Args:
            clock: Millisecond clock shared by every cache, monotonic by default
        """
        self._clock = clock
        self._caches: Dict[str, NamedCache] = {}
        self._sweeper_task: Optional[asyncio.Task] = None

    def get_cache(self, name: str, config: Optional[CacheConfig] = None) -> NamedCache:
        """Get or lazily create a named cache.

        The configuration is only used when the cache is created. A later
        call with a different configuration leaves the existing cache
        untouched and logs a warning.
        """
        named = self._caches.get(name)
        if named is not None:
            if config is not None and config != named.config:
                logger.warning(
                    f"Cache '{name}' already exists, ignoring new configuration",
                    extra={
                        "cache_name": name,
                        "existing_config": named.config.to_dict(),
                        "requested_config": config.to_dict(),
                    },
                )
            return named

        config = config or CacheConfigs.for_cache(name)
        named = NamedCache(
            name=name,
            config=config,
            store=BoundedTTLCache.from_config(config, clock=self._clock),
        )
        self._caches[name] = named
        logger.debug(f"Created cache '{name}' (max={config.max_entries}, ttl={config.ttl_ms}ms)")
        return named

    def has_cache(self, name: str) -> bool:
        return name in self._caches

    def cache_names(self) -> List[str]:
        return list(self._caches)

    def get(self, cache_name: str, key: str, config: Optional[CacheConfig] = None) -> Optional[Any]:
        """Get a value and record a hit or a miss.

        A stored ``None`` is a hit that returns ``None``; use ``contains`` or
        the ``cached`` decorator when that difference matters.
        """
        value = self._lookup(cache_name, key, config)
        return None if value is _MISSING else value

    def contains(self, cache_name: str, key: str) -> bool:
        """Whether a live entry exists, without touching counters or TTL."""
        named = self._caches.get(cache_name)
        return named is not None and key in named.store

    def _lookup(self, cache_name: str, key: str, config: Optional[CacheConfig]) -> Any:
        named = self.get_cache(cache_name, config)
        value = named.store.get(key, _MISSING)

        if value is not _MISSING:
            named.hits += 1
            logger.debug(f"Cache hit {cache_name}:{key}")
        else:
            named.misses += 1
            logger.debug(f"Cache miss {cache_name}:{key}")

        return value

    def set(
        self,
        cache_name: str,
        key: str,
        value: Any,
        config: Optional[CacheConfig] = None,
        ttl_ms: Optional[int] = None,
    ) -> None:
        """Store a value and record a set.

        ``ttl_ms`` overrides the cache TTL for this entry only.
        """
        named = self.get_cache(cache_name, config)
        named.store.set(key, value, ttl_ms=ttl_ms)
        named.sets += 1
        logger.debug(f"Cache set {cache_name}:{key}")

    def delete(self, cache_name: str, key: str) -> bool:
        named = self._caches.get(cache_name)
        if named is None:
            return False
        return named.store.delete(key)

    def clear(self, cache_name: str) -> None:
        """Remove every entry of one cache. Counters are kept."""
        named = self._caches.get(cache_name)
        if named is not None:
            named.store.clear()
            logger.info(f"Cleared cache '{cache_name}'")

    def clear_all(self) -> None:
        """Remove every entry of every cache. Counters are kept."""
        for name, named in self._caches.items():
            named.store.clear()
            logger.info(f"Cleared cache '{name}'")

    def invalidate_pattern(self, cache_name: str, pattern: str) -> int:
        """Delete every live key of a cache matching a regular expression.

        Raises:
            InvalidPatternError: If the pattern does not compile

        Returns:
            Number of keys deleted
        """
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e), cache_name) from e

        named = self._caches.get(cache_name)
        if named is None:
            return 0

        deleted_count = 0
        for key in named.store.keys():
            if regex.search(key) and named.store.delete(key):
                deleted_count += 1

        logger.info(
            f"Invalidated {deleted_count} keys in '{cache_name}' matching '{pattern}'",
            extra={"cache_name": cache_name, "pattern": pattern, "count": deleted_count},
        )
        return deleted_count

    def invalidate_namespace(self, cache_name: str, namespace: str) -> int:
        """Delete every key of a cache under a key namespace such as ``users:list``."""
        named = self._caches.get(cache_name)
        if named is None:
            return 0

        deleted_count = named.store.delete_namespace(namespace)
        logger.info(
            f"Invalidated {deleted_count} keys in '{cache_name}' namespace '{namespace}'",
            extra={"cache_name": cache_name, "namespace": namespace, "count": deleted_count},
        )
        return deleted_count

    def get_stats(self, cache_name: Optional[str] = None) -> Any:
        """Get statistics.

        Args:
            cache_name: Cache to report on; all caches when omitted

        Returns:
            CacheStats for one cache (None when unknown), or a mapping of
            cache name to CacheStats
        """
        if cache_name is not None:
            named = self._caches.get(cache_name)
            return self._build_stats(named) if named is not None else None

        return {name: self._build_stats(named) for name, named in self._caches.items()}

    def purge_expired(self) -> int:
        """Remove expired entries from every cache."""
        return sum(named.store.purge_expired() for named in self._caches.values())

    async def start_sweeper(self, interval_seconds: float) -> None:
        """Start the background expiry sweep."""
        if self._sweeper_task is None or self._sweeper_task.done():
            self._sweeper_task = asyncio.create_task(self._sweep_loop(interval_seconds))

    async def stop_sweeper(self) -> None:
        """Stop the background expiry sweep."""
        if self._sweeper_task:
            self._sweeper_task.cancel()
            try:
                await self._sweeper_task
            except asyncio.CancelledError:
                pass
            self._sweeper_task = None

    def cached(
        self,
        cache_name: str,
        key_builder: Callable[..., str],
        config: Optional[CacheConfig] = None,
    ) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
        """Read-through cache decorator for async functions.

        Results are stored under ``key_builder(*args, **kwargs)``. Exceptions
        propagate and are never cached; a ``None`` result is cached like any
        other value.
        """

        def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
            @functools.wraps(func)
            async def wrapper(*args: Any, **kwargs: Any) -> T:
                key = key_builder(*args, **kwargs)

                cached_value = self._lookup(cache_name, key, config)
                if cached_value is not _MISSING:
                    return cached_value

                result = await func(*args, **kwargs)
                self.set(cache_name, key, result, config)
                return result

            return wrapper

        return decorator

    async def _sweep_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                removed = self.purge_expired()
                if removed:
                    logger.debug(f"Expiry sweep removed {removed} entries")
            except Exception as e:
                logger.error(f"Expiry sweep failed: {e}")

    @staticmethod
    def _build_stats(named: NamedCache) -> CacheStats:
        return CacheStats(
            name=named.name,
            size=named.store.size,
            max=named.store.max,
            hits=named.hits,
            misses=named.misses,
            sets=named.sets,
            hit_rate=calculate_hit_rate(named.hits, named.misses),
            evictions=named.store.evictions,
            expirations=named.store.expirations,
        )
