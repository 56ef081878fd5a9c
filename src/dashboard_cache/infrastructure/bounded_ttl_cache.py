"""Bounded TTL cache.

ONLY in-memory storage - a key/value store with a hard entry limit and
per-key expiry.

Eviction is by insertion order: when a new key arrives at capacity the
oldest inserted key is dropped, whatever its access recency. Overwriting a
key keeps its original position.

Expiry deadlines are kept in a min-heap. Every operation first purges the
entries whose deadline has passed, and ``purge_expired`` can be driven from
a background sweep, so ``size`` only ever counts live entries.
"""

import heapq
import itertools
import time
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from ..core.entities.cache_entry import CacheEntry
from ..core.value_objects.cache_config import CacheConfig
from ..core.value_objects.cache_key import CacheKeyGenerator


Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default cache clock in milliseconds."""
    return time.monotonic() * 1000.0


class BoundedTTLCache:
    """In-memory key/value store with capacity eviction and TTL expiry."""

    # Rebuild the deadline heap once it holds this many times the live entries.
    HEAP_COMPACTION_FACTOR = 4
    HEAP_COMPACTION_MIN = 64

    def __init__(
        self,
        max_entries: int,
        ttl_ms: int,
        refresh_ttl_on_access: bool = True,
        clock: Optional[Clock] = None,
    ):
        """Initialize cache.

        Args:
            max_entries: Maximum number of live entries
            ttl_ms: Time to live of each entry in milliseconds
            refresh_ttl_on_access: Restart an entry's TTL when it is read
            clock: Millisecond clock, monotonic time by default
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")

        self._max_entries = max_entries
        self._ttl_ms = ttl_ms
        self._refresh_ttl_on_access = refresh_ttl_on_access
        self._clock = clock or monotonic_ms

        self._entries: Dict[str, CacheEntry] = {}
        self._deadlines: List[Tuple[float, int, str]] = []
        self._sequence = itertools.count()
        self._namespace_index: Dict[str, Set[str]] = defaultdict(set)

        self._evictions = 0
        self._expirations = 0

    @classmethod
    def from_config(cls, config: CacheConfig, clock: Optional[Clock] = None) -> "BoundedTTLCache":
        return cls(
            max_entries=config.max_entries,
            ttl_ms=config.ttl_ms,
            refresh_ttl_on_access=config.refresh_ttl_on_access,
            clock=clock,
        )

    @property
    def max(self) -> int:
        return self._max_entries

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def size(self) -> int:
        self.purge_expired()
        return len(self._entries)

    @property
    def evictions(self) -> int:
        return self._evictions

    @property
    def expirations(self) -> int:
        return self._expirations

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: str) -> bool:
        self.purge_expired()
        return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        """Get a live value, or ``default`` when absent or expired."""
        now = self._clock()
        self.purge_expired(now)

        entry = self._entries.get(key)
        if entry is None:
            return default

        if self._refresh_ttl_on_access:
            entry.refresh(now)
            self._schedule(key, entry.expires_at)

        return entry.value

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Get the live entry without touching its TTL."""
        self.purge_expired()
        return self._entries.get(key)

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """Insert or overwrite a value and (re)start its TTL.

        Args:
            key: Cache key
            value: Value to store
            ttl_ms: Lifetime of this entry, the cache TTL by default
        """
        if ttl_ms is not None and ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")

        now = self._clock()
        self.purge_expired(now)

        if key not in self._entries and len(self._entries) >= self._max_entries:
            oldest_key = next(iter(self._entries))
            self._remove(oldest_key)
            self._evictions += 1

        ttl_ms = ttl_ms or self._ttl_ms
        entry = CacheEntry(value=value, inserted_at=now, expires_at=now + ttl_ms, ttl_ms=ttl_ms)
        # Assigning to an existing key keeps its insertion position.
        self._entries[key] = entry
        self._namespace_index[CacheKeyGenerator.namespace_of(key)].add(key)
        self._schedule(key, entry.expires_at)

    def delete(self, key: str) -> bool:
        """Delete a key. Returns whether it was present."""
        self.purge_expired()
        return self._remove(key) is not None

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
        self._deadlines.clear()
        self._namespace_index.clear()

    def keys(self) -> List[str]:
        """Live keys in insertion order."""
        self.purge_expired()
        return list(self._entries)

    def keys_in_namespace(self, namespace: str) -> List[str]:
        self.purge_expired()
        return list(self._namespace_index.get(namespace, ()))

    def delete_namespace(self, namespace: str) -> int:
        """Delete every key indexed under a namespace."""
        keys = self.keys_in_namespace(namespace)
        for key in keys:
            self._remove(key)
        return len(keys)

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Remove every entry whose deadline has passed.

        Returns:
            Number of entries removed
        """
        if now is None:
            now = self._clock()

        removed = 0
        while self._deadlines and self._deadlines[0][0] <= now:
            deadline, _, key = heapq.heappop(self._deadlines)
            entry = self._entries.get(key)
            # Skip heap records superseded by a refresh, overwrite or delete.
            if entry is not None and entry.expires_at == deadline:
                self._remove(key)
                removed += 1

        self._expirations += removed
        return removed

    def _schedule(self, key: str, deadline: float) -> None:
        heapq.heappush(self._deadlines, (deadline, next(self._sequence), key))

        limit = max(self.HEAP_COMPACTION_MIN, len(self._entries) * self.HEAP_COMPACTION_FACTOR)
        if len(self._deadlines) > limit:
            self._deadlines = [
                (entry.expires_at, next(self._sequence), entry_key)
                for entry_key, entry in self._entries.items()
            ]
            heapq.heapify(self._deadlines)

    def _remove(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.pop(key, None)
        if entry is None:
            return None

        namespace = CacheKeyGenerator.namespace_of(key)
        indexed = self._namespace_index.get(namespace)
        if indexed is not None:
            indexed.discard(key)
            if not indexed:
                del self._namespace_index[namespace]
        return entry
