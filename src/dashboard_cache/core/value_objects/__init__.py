"""Cache value objects."""

from .cache_config import CacheConfig
from .cache_key import CacheKeyGenerator
from .event_kind import EventAction, EventDomain, EventKind

__all__ = [
    "CacheConfig",
    "CacheKeyGenerator",
    "EventAction",
    "EventDomain",
    "EventKind",
]
