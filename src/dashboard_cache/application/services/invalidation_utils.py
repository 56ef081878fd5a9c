"""Invalidation shortcuts.

ONLY event construction - builds the common invalidation events and hands
them to the engine queue.
"""

from typing import Any, Dict, Optional

from ...core.entities.invalidation_event import InvalidationEvent
from ...core.value_objects.event_kind import EventAction, EventDomain, EventKind
from .invalidation_engine import CacheInvalidationEngine


class CacheInvalidationUtils:
    """Helpers for the invalidations handlers trigger most often."""

    def __init__(self, engine: CacheInvalidationEngine):
        self._engine = engine

    def invalidate_user(self, user_id: str, action: str = "update") -> None:
        """Queue a single-user change (``create``, ``update`` or ``delete``)."""
        self._engine.queue_invalidation(
            InvalidationEvent(
                domain=EventDomain.USER,
                action=EventAction(action),
                source="api",
                entity_id=user_id,
            )
        )

    def invalidate_user_list(self, filters: Optional[Dict[str, Any]] = None) -> None:
        """Queue a bulk user change affecting the given filter fields."""
        self._engine.queue_invalidation(
            InvalidationEvent.create(
                EventKind.USER_BULK_UPDATE,
                source="api",
                affected_fields=list(filters) if filters else None,
            )
        )

    def invalidate_performance(self) -> None:
        self._engine.queue_invalidation(
            InvalidationEvent.create(EventKind.PERFORMANCE_UPDATE, source="system")
        )

    def invalidate_all(self, source: str = "deployment") -> None:
        """Queue a deployment-wide invalidation of every cache."""
        self._engine.queue_invalidation(
            InvalidationEvent.create(EventKind.GLOBAL_DEPLOYMENT, source=source)
        )
