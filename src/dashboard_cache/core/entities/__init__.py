"""Cache entities."""

from .cache_entry import CacheEntry
from .invalidation_event import InvalidationEvent
from .invalidation_log_entry import InvalidationLogEntry
from .invalidation_rule import InvalidationRule, RuleCondition

__all__ = [
    "CacheEntry",
    "InvalidationEvent",
    "InvalidationLogEntry",
    "InvalidationRule",
    "RuleCondition",
]
