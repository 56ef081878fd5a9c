"""Cache entry entity."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CacheEntry:
    """A stored value with its insertion time and expiry deadline.

    Times are milliseconds on the owning cache's clock. ``ttl_ms`` is the
    lifetime the entry was stored with and is reused on refresh.
    """

    value: Any
    inserted_at: float
    expires_at: float
    ttl_ms: Optional[float] = None

    def __post_init__(self):
        if self.expires_at <= self.inserted_at:
            raise ValueError("expires_at must be after inserted_at")
        if self.ttl_ms is None:
            self.ttl_ms = self.expires_at - self.inserted_at

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def time_until_expiry(self, now: float) -> float:
        return max(0.0, self.expires_at - now)

    def refresh(self, now: float, ttl_ms: Optional[float] = None) -> None:
        """Restart the TTL from ``now``."""
        self.expires_at = now + (ttl_ms if ttl_ms is not None else self.ttl_ms)
