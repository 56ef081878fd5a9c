"""Cache application services."""

from .cache_manager import CacheManager, CacheStats, NamedCache, calculate_hit_rate
from .cache_invalidator import CacheInvalidator
from .cache_monitor import (
    CacheMetrics,
    CacheMonitor,
    CacheMonitoringData,
    HealthStatus,
    generate_recommendations,
)
from .cache_warmup import CacheWarmup, WarmupReport, WarmupResult
from .invalidation_engine import CacheInvalidationEngine, default_rules
from .invalidation_monitor import CacheInvalidationMonitor
from .invalidation_utils import CacheInvalidationUtils

__all__ = [
    "CacheManager",
    "CacheStats",
    "NamedCache",
    "calculate_hit_rate",
    "CacheInvalidator",
    "CacheMetrics",
    "CacheMonitor",
    "CacheMonitoringData",
    "HealthStatus",
    "generate_recommendations",
    "CacheWarmup",
    "WarmupReport",
    "WarmupResult",
    "CacheInvalidationEngine",
    "default_rules",
    "CacheInvalidationMonitor",
    "CacheInvalidationUtils",
]
