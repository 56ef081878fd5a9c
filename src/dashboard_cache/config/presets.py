"""Predefined named cache configurations."""

from typing import Dict

from ..core.value_objects.cache_config import CacheConfig


class CacheConfigs:
    """Capacity and TTL of each named cache used by the dashboard."""

    # User documents - 5 minutes, 1000 entries
    users = CacheConfig.seconds(1000, 5 * 60, refresh_ttl_on_access=True, allow_stale=False)

    # Paginated user lists change often - 1 minute, 100 entries
    usersList = CacheConfig.seconds(100, 60, refresh_ttl_on_access=True, allow_stale=True)

    # Aggregated user statistics - 10 minutes, 10 entries
    userStats = CacheConfig.seconds(10, 10 * 60, refresh_ttl_on_access=True, allow_stale=True)

    # Query performance data - 30 seconds, 50 entries
    performance = CacheConfig.seconds(50, 30, refresh_ttl_on_access=False, allow_stale=False)

    # Database status - 2 minutes, 5 entries
    dbStatus = CacheConfig.seconds(5, 2 * 60, refresh_ttl_on_access=True, allow_stale=True)

    # Sessions - 30 minutes, 500 entries
    session = CacheConfig.seconds(500, 30 * 60, refresh_ttl_on_access=True, allow_stale=False)

    # Whole HTTP responses - 2 minutes, 500 entries
    apiResponses = CacheConfig.seconds(500, 2 * 60, refresh_ttl_on_access=True, allow_stale=True)

    default = CacheConfig.seconds(1000, 5 * 60)

    @classmethod
    def all(cls) -> Dict[str, CacheConfig]:
        return {
            name: value
            for name, value in vars(cls).items()
            if isinstance(value, CacheConfig) and name != "default"
        }

    @classmethod
    def for_cache(cls, cache_name: str) -> CacheConfig:
        """Preset for a cache name, or the default preset."""
        return cls.all().get(cache_name, cls.default)
