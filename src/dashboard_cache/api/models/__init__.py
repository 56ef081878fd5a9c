"""Cache API models."""

from .responses import (
    CacheAction,
    CacheActionRequest,
    CacheActionResponse,
    CacheMetricsSummary,
    CacheStatsResponse,
    CacheSummary,
)

__all__ = [
    "CacheAction",
    "CacheActionRequest",
    "CacheActionResponse",
    "CacheMetricsSummary",
    "CacheStatsResponse",
    "CacheSummary",
]
