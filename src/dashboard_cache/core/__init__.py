"""Core cache domain: value objects, entities and exceptions."""

from .exceptions import (
    CacheConfigurationError,
    CacheError,
    InvalidPatternError,
    UnknownEventKindError,
)
from .value_objects import CacheConfig, CacheKeyGenerator, EventAction, EventDomain, EventKind
from .entities import (
    CacheEntry,
    InvalidationEvent,
    InvalidationLogEntry,
    InvalidationRule,
)

__all__ = [
    "CacheConfigurationError",
    "CacheError",
    "InvalidPatternError",
    "UnknownEventKindError",
    "CacheConfig",
    "CacheKeyGenerator",
    "EventAction",
    "EventDomain",
    "EventKind",
    "CacheEntry",
    "InvalidationEvent",
    "InvalidationLogEntry",
    "InvalidationRule",
]
