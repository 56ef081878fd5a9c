"""Event-based cache invalidation engine.

ONLY rule-driven invalidation - turns domain events (user created, bulk
update, deployment, ...) into pattern invalidations on named caches.

Events are queued and drained strictly in FIFO order: an event, including
any per-rule delay, is fully applied before the next one is dequeued.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Protocol

from ...core.entities.invalidation_event import InvalidationEvent
from ...core.entities.invalidation_log_entry import InvalidationLogEntry
from ...core.entities.invalidation_rule import InvalidationRule
from ...core.value_objects.event_kind import EventKind
from .cache_manager import CacheManager
from .invalidation_monitor import CacheInvalidationMonitor

logger = logging.getLogger(__name__)

API_RESPONSES_CACHE = "apiResponses"

# Cache name standing for every cache registered at processing time
ALL_CACHES = "*"


class PatternInvalidator(Protocol):
    """Anything that can drop cached entries by key pattern."""

    def invalidate_by_pattern(self, pattern: str) -> int:
        ...


def default_rules() -> List[InvalidationRule]:
    """Rules installed when the engine starts."""
    return [
        # User data changes
        InvalidationRule.for_event(
            "user:create",
            cache_patterns=["users:list:.*", "users:stats.*"],
            cache_names=["usersList", "userStats"],
        ),
        InvalidationRule.for_event(
            "user:update",
            cache_patterns=["users:.*", "user:.*", "users:list:.*", "users:stats.*"],
            cache_names=["users", "usersList", "userStats"],
        ),
        InvalidationRule.for_event(
            "user:delete",
            cache_patterns=["users:.*", "user:.*", "users:list:.*", "users:stats.*"],
            cache_names=["users", "usersList", "userStats"],
        ),
        InvalidationRule.for_event(
            "user:bulk_update",
            cache_patterns=["users:list:.*", "users:stats.*"],
            cache_names=["usersList", "userStats"],
            # Let bulk writes settle before clearing
            delay_ms=1000,
        ),
        # Performance data changes
        InvalidationRule.for_event(
            "performance:update",
            cache_patterns=["performance:.*"],
            cache_names=["performance"],
        ),
        # API response changes
        InvalidationRule.for_event(
            "api:response_change",
            cache_patterns=["api:.*"],
            cache_names=[API_RESPONSES_CACHE],
        ),
        # Deployments clear everything
        InvalidationRule.for_event(
            "global:deployment",
            cache_patterns=[".*"],
            cache_names=[ALL_CACHES],
        ),
    ]


class CacheInvalidationEngine:
    """Queued, rule-based cache invalidation.

    Per event: queued -> processing -> applied. ``is_processing`` prevents
    re-entrant drains; it is not a lock, everything runs on one event loop.
    """

    def __init__(
        self,
        cache_manager: CacheManager,
        api_cache: Optional[PatternInvalidator] = None,
        monitor: Optional[CacheInvalidationMonitor] = None,
        rules: Optional[List[InvalidationRule]] = None,
    ):
        """Initialize invalidation engine.

        Args:
            cache_manager: Named caches the rules are applied to
            api_cache: Whole-response cache invalidated alongside ``apiResponses``
            monitor: History of processed events
            rules: Initial rules, the default rule table when omitted
        """
        self._cache_manager = cache_manager
        self._api_cache = api_cache
        self._monitor = monitor if monitor is not None else CacheInvalidationMonitor()
        self._rules: List[InvalidationRule] = list(rules) if rules is not None else default_rules()
        self._queue: Deque[InvalidationEvent] = deque()
        self._is_processing = False
        self._drain_task: Optional[asyncio.Task] = None
        self._periodic_task: Optional[asyncio.Task] = None

        logger.info(f"Cache invalidation rules initialized: {len(self._rules)}")

    @property
    def monitor(self) -> CacheInvalidationMonitor:
        return self._monitor

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def rules(self) -> List[InvalidationRule]:
        return list(self._rules)

    def initialize_rules(self) -> None:
        """Reset the rule table to the defaults."""
        self._rules = default_rules()
        logger.info(f"Cache invalidation rules initialized: {len(self._rules)}")

    def add_rule(self, rule: InvalidationRule) -> None:
        self._rules.append(rule)
        logger.info(f"Cache invalidation rule added: {rule.event_key}")

    def queue_invalidation(self, event: InvalidationEvent) -> None:
        """Queue an event and start draining if no drain is running.

        Without a running event loop the event stays queued until
        ``process_queue()`` is awaited.
        """
        event.stamp()
        self._queue.append(event)
        logger.info(f"Invalidation event queued: {event.event_key}")

        if not self._is_processing:
            self._schedule_drain()

    async def process_queue(self) -> None:
        """Drain the queue in FIFO order.

        An error stops the current drain and is logged; events still queued
        are picked up by the next drain.
        """
        if self._is_processing or not self._queue:
            return

        self._is_processing = True
        try:
            while self._queue:
                event = self._queue.popleft()
                await self.process_event(event)
        except Exception:
            logger.exception("Error processing invalidation queue")
        finally:
            self._is_processing = False

    async def process_event(self, event: InvalidationEvent) -> int:
        """Apply every rule matching an event.

        Returns:
            Number of cache entries invalidated
        """
        kind = event.kind
        matching_rules = [rule for rule in self._rules if rule.applies_to(kind)]

        total_invalidated = 0
        for rule in matching_rules:
            if rule.condition is not None and not rule.condition(event):
                continue

            if rule.delay_ms:
                await asyncio.sleep(rule.delay_ms / 1000)

            invalidated = 0
            for pattern, cache_name in rule.targets(self._resolve_cache_names(rule)):
                invalidated += self._cache_manager.invalidate_pattern(cache_name, pattern)

            if self._api_cache is not None and (
                API_RESPONSES_CACHE in rule.cache_names or ALL_CACHES in rule.cache_names
            ):
                for pattern in rule.cache_patterns:
                    invalidated += self._api_cache.invalidate_by_pattern(pattern)

            logger.info(f"Invalidation rule {rule.event_key} processed: {invalidated} items invalidated")
            total_invalidated += invalidated

        self._log_event(event, len(matching_rules), total_invalidated)
        return total_invalidated

    async def invalidate_immediate(self, event: InvalidationEvent) -> int:
        """Apply an event right away, bypassing the queue."""
        event.stamp()
        return await self.process_event(event)

    async def wait_until_idle(self) -> None:
        """Wait for the running drain, if any, to finish."""
        while self._drain_task is not None and not self._drain_task.done():
            await asyncio.wait({self._drain_task})

    def get_queue_status(self) -> Dict[str, Any]:
        return {
            "queue_length": len(self._queue),
            "is_processing": self._is_processing,
            "rules_count": len(self._rules),
        }

    def clear_queue(self) -> None:
        """Drop every queued event."""
        self._queue.clear()
        logger.info("Invalidation queue cleared")

    async def schedule_periodic_invalidation(
        self,
        interval_minutes: float = 60,
        source: str = "scheduled_cleanup",
    ) -> None:
        """Periodically queue an API response invalidation."""
        await self.stop_periodic_invalidation()
        logger.info(f"Scheduling periodic invalidation every {interval_minutes} minutes")
        self._periodic_task = asyncio.create_task(self._periodic_loop(interval_minutes * 60, source))

    async def stop_periodic_invalidation(self) -> None:
        if self._periodic_task:
            self._periodic_task.cancel()
            try:
                await self._periodic_task
            except asyncio.CancelledError:
                pass
            self._periodic_task = None

    async def shutdown(self) -> None:
        """Stop periodic work and let the queued events apply."""
        await self.stop_periodic_invalidation()
        await self.wait_until_idle()
        if self._queue:
            await self.process_queue()

    def _resolve_cache_names(self, rule: InvalidationRule) -> List[str]:
        """Cache names of a rule with ``ALL_CACHES`` expanded to the live registry."""
        cache_names: List[str] = []
        for cache_name in rule.cache_names:
            expanded = self._cache_manager.cache_names() if cache_name == ALL_CACHES else [cache_name]
            for name in expanded:
                if name not in cache_names:
                    cache_names.append(name)
        return cache_names

    def _schedule_drain(self) -> None:
        if self._drain_task is not None and not self._drain_task.done():
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, invalidation event left queued")
            return

        self._drain_task = loop.create_task(self.process_queue())

    async def _periodic_loop(self, interval_seconds: float, source: str) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.queue_invalidation(
                InvalidationEvent.create(EventKind.API_RESPONSE_CHANGE, source=source)
            )

    def _log_event(self, event: InvalidationEvent, rules_processed: int, items_invalidated: int) -> None:
        entry = InvalidationLogEntry.from_event(event, rules_processed, items_invalidated)
        logger.info(
            f"Invalidation event processed: {entry.event_key}",
            extra={
                "event_key": entry.event_key,
                "entity_id": entry.entity_id,
                "rules_processed": rules_processed,
                "items_invalidated": items_invalidated,
                "source": entry.source,
            },
        )
        self._monitor.record_event(entry)
