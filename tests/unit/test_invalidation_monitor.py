"""Tests for the invalidation history."""

from datetime import datetime, timedelta, timezone

import pytest

from dashboard_cache.application.services.invalidation_monitor import CacheInvalidationMonitor
from dashboard_cache.core.entities.invalidation_log_entry import InvalidationLogEntry

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def entry(event_key="user:update", source="api", hours_ago=0.0, rules=1, items=0):
    return InvalidationLogEntry(
        timestamp=NOW - timedelta(hours=hours_ago),
        event_key=event_key,
        rules_processed=rules,
        source=source,
        items_invalidated=items,
    )


class TestCacheInvalidationMonitor:
    """Ring buffer and statistics."""

    def test_newest_first(self):
        monitor = CacheInvalidationMonitor()
        monitor.record_event(entry("user:create"))
        monitor.record_event(entry("user:delete"))

        assert [e.event_key for e in monitor.get_recent_events()] == ["user:delete", "user:create"]

    def test_bounded_history_drops_oldest(self):
        monitor = CacheInvalidationMonitor(max_events=3)
        for i in range(5):
            monitor.record_event(entry("user:update", items=i))

        assert len(monitor) == 3
        assert [e.items_invalidated for e in monitor.get_recent_events()] == [4, 3, 2]

    def test_recent_events_limit(self):
        monitor = CacheInvalidationMonitor()
        for _ in range(10):
            monitor.record_event(entry())

        assert len(monitor.get_recent_events(limit=4)) == 4

    def test_default_capacity(self):
        assert CacheInvalidationMonitor().max_events == 1000

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            CacheInvalidationMonitor(max_events=0)

    def test_statistics_window(self):
        monitor = CacheInvalidationMonitor()
        monitor.record_event(entry("user:create", hours_ago=30, rules=5))
        monitor.record_event(entry("user:update", source="api", hours_ago=2, rules=1, items=3))
        monitor.record_event(entry("user:update", source="admin", hours_ago=1, rules=3, items=1))
        monitor.record_event(entry("global:deployment", source="deployment", rules=2))

        stats = monitor.get_statistics(hours=24, now=NOW)

        assert stats["total_events"] == 3
        assert stats["events_by_type"] == {"global:deployment": 1, "user:update": 2}
        assert stats["events_by_source"] == {"deployment": 1, "admin": 1, "api": 1}
        assert stats["rules_processed"] == 6
        assert stats["items_invalidated"] == 4
        assert stats["average_rules_per_event"] == 2.0
        assert stats["time_range"] == "24 hours"
        assert stats["newest_event"] == NOW.isoformat()
        assert stats["oldest_event"] == (NOW - timedelta(hours=2)).isoformat()

    def test_statistics_without_events(self):
        stats = CacheInvalidationMonitor().get_statistics(now=NOW)

        assert stats["total_events"] == 0
        assert stats["average_rules_per_event"] == 0.0
        assert stats["oldest_event"] is None
        assert stats["newest_event"] is None

    def test_clear_history(self):
        monitor = CacheInvalidationMonitor()
        monitor.record_event(entry())

        monitor.clear_history()

        assert monitor.get_recent_events() == []
