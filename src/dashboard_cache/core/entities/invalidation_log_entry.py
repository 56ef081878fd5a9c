"""Invalidation log entry entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .invalidation_event import InvalidationEvent


@dataclass(frozen=True)
class InvalidationLogEntry:
    """Record of one processed invalidation event."""

    timestamp: datetime
    event_key: str
    rules_processed: int
    source: str
    entity_id: Optional[str] = None
    affected_fields: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None
    items_invalidated: int = 0

    @classmethod
    def from_event(
        cls,
        event: InvalidationEvent,
        rules_processed: int,
        items_invalidated: int = 0,
    ) -> "InvalidationLogEntry":
        return cls(
            timestamp=event.timestamp,
            event_key=event.event_key,
            rules_processed=rules_processed,
            source=event.source,
            entity_id=event.entity_id,
            affected_fields=list(event.affected_fields) if event.affected_fields else None,
            metadata=dict(event.metadata) if event.metadata else None,
            items_invalidated=items_invalidated,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_key": self.event_key,
            "entity_id": self.entity_id,
            "affected_fields": self.affected_fields,
            "rules_processed": self.rules_processed,
            "items_invalidated": self.items_invalidated,
            "source": self.source,
            "metadata": self.metadata,
        }
