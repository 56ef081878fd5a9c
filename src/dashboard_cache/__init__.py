"""dashboard-cache: in-process caching for the admin dashboard.

Bounded TTL caches with statistics, rule-based invalidation driven by
domain events, health monitoring and whole-response HTTP caching.
"""

from .__version__ import __version__
from .application.services import (
    CacheInvalidationEngine,
    CacheInvalidationMonitor,
    CacheInvalidationUtils,
    CacheInvalidator,
    CacheManager,
    CacheMonitor,
    CacheStats,
    CacheWarmup,
    HealthStatus,
)
from .config import CacheConfigs, CacheSettings, LoggingConfig, get_settings, setup_logging
from .core import (
    CacheConfig,
    CacheError,
    CacheKeyGenerator,
    EventAction,
    EventDomain,
    EventKind,
    InvalidationEvent,
    InvalidationRule,
    InvalidPatternError,
)
from .infrastructure import BoundedTTLCache
from .service import CacheService, create_cache_service

__all__ = [
    "__version__",
    "CacheInvalidationEngine",
    "CacheInvalidationMonitor",
    "CacheInvalidationUtils",
    "CacheInvalidator",
    "CacheManager",
    "CacheMonitor",
    "CacheStats",
    "CacheWarmup",
    "HealthStatus",
    "CacheConfigs",
    "CacheSettings",
    "LoggingConfig",
    "get_settings",
    "setup_logging",
    "CacheConfig",
    "CacheError",
    "CacheKeyGenerator",
    "EventAction",
    "EventDomain",
    "EventKind",
    "InvalidationEvent",
    "InvalidationRule",
    "InvalidPatternError",
    "BoundedTTLCache",
    "CacheService",
    "create_cache_service",
]
