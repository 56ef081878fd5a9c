"""Invalidation event entity.

Describes a change to underlying data. Events are consumed exactly once by
the invalidation engine and are never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from ..value_objects.event_kind import EventAction, EventDomain, EventKind


@dataclass
class InvalidationEvent:
    """Structured notification that some data changed."""

    domain: EventDomain
    action: EventAction
    source: str = "api"
    entity_id: Optional[str] = None
    affected_fields: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.domain = EventDomain(self.domain)
        self.action = EventAction(self.action)

    @classmethod
    def create(
        cls,
        kind: Union[EventKind, str],
        source: str = "api",
        **kwargs: Any,
    ) -> "InvalidationEvent":
        """Create an event from a kind such as ``EventKind.USER_UPDATE``."""
        kind = EventKind(kind)
        return cls(domain=kind.domain, action=kind.action, source=source, **kwargs)

    @property
    def event_key(self) -> str:
        return f"{self.domain.value}:{self.action.value}"

    @property
    def kind(self) -> Optional[EventKind]:
        return EventKind.of(self.domain, self.action)

    def stamp(self) -> None:
        """Reset the timestamp to the current time."""
        self.timestamp = datetime.now(timezone.utc)
