"""Cache configuration value object.

Immutable per-cache settings: capacity, time-to-live and access behaviour.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from ..exceptions import CacheConfigurationError


@dataclass(frozen=True)
class CacheConfig:
    """Configuration of a single named cache.

    Attributes:
        max_entries: Maximum number of live entries before eviction
        ttl_ms: Time to live of each entry in milliseconds
        refresh_ttl_on_access: Restart an entry's TTL whenever it is read
        allow_stale: Advisory flag reported in statistics; expired entries
            are always removed
    """

    max_entries: int
    ttl_ms: int
    refresh_ttl_on_access: bool = True
    allow_stale: bool = False

    def __post_init__(self):
        if self.max_entries <= 0:
            raise CacheConfigurationError("max_entries must be positive", "max_entries")
        if self.ttl_ms <= 0:
            raise CacheConfigurationError("ttl_ms must be positive", "ttl_ms")

    @classmethod
    def seconds(
        cls,
        max_entries: int,
        ttl_seconds: float,
        refresh_ttl_on_access: bool = True,
        allow_stale: bool = False,
    ) -> "CacheConfig":
        """Create configuration with TTL expressed in seconds."""
        return cls(max_entries, int(ttl_seconds * 1000), refresh_ttl_on_access, allow_stale)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
