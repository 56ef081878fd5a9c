"""Cache invalidation monitor.

ONLY invalidation history - keeps a bounded, newest-first record of
processed invalidation events and summarizes it.
"""

import logging
from collections import Counter, deque
from datetime import datetime, timedelta, timezone
from typing import Any, Deque, Dict, List, Optional

from ...core.entities.invalidation_log_entry import InvalidationLogEntry

logger = logging.getLogger(__name__)


class CacheInvalidationMonitor:
    """Ring buffer of processed invalidation events."""

    DEFAULT_MAX_EVENTS = 1000

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS):
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        # Newest entry first; the oldest entries fall off the right end.
        self._events: Deque[InvalidationLogEntry] = deque(maxlen=max_events)

    @property
    def max_events(self) -> int:
        return self._events.maxlen

    def __len__(self) -> int:
        return len(self._events)

    def record_event(self, entry: InvalidationLogEntry) -> None:
        self._events.appendleft(entry)

    def get_recent_events(self, limit: int = 50) -> List[InvalidationLogEntry]:
        return list(self._events)[:limit]

    def get_statistics(self, hours: float = 24, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Summarize events recorded within the last ``hours``.

        Args:
            hours: Size of the time window
            now: End of the window, current UTC time by default

        Returns:
            Totals, distributions by event key and source, and the window bounds
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(hours=hours)
        recent = [event for event in self._events if event.timestamp > cutoff]

        rules_processed = sum(event.rules_processed for event in recent)

        return {
            "total_events": len(recent),
            "events_by_type": dict(Counter(event.event_key for event in recent)),
            "events_by_source": dict(Counter(event.source for event in recent)),
            "rules_processed": rules_processed,
            "items_invalidated": sum(event.items_invalidated for event in recent),
            "average_rules_per_event": rules_processed / len(recent) if recent else 0.0,
            "time_range": f"{hours} hours",
            "oldest_event": recent[-1].timestamp.isoformat() if recent else None,
            "newest_event": recent[0].timestamp.isoformat() if recent else None,
        }

    def clear_history(self) -> None:
        self._events.clear()
        logger.info("Invalidation event history cleared")
