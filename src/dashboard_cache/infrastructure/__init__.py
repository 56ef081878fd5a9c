"""Cache storage implementations."""

from .bounded_ttl_cache import BoundedTTLCache, Clock, monotonic_ms

__all__ = ["BoundedTTLCache", "Clock", "monotonic_ms"]
