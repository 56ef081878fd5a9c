"""Invalidation event kinds.

Each kind is one valid ``domain:action`` pair. Rules are bound to a set of
kinds, and a ``<domain>:*`` key expands to every kind of that domain.
"""

from enum import Enum
from typing import FrozenSet, Optional, Union

from ..exceptions import UnknownEventKindError


class EventDomain(str, Enum):
    """Area of the system whose data changed."""
    USER = "user"
    DATA = "data"
    API = "api"
    PERFORMANCE = "performance"
    GLOBAL = "global"


class EventAction(str, Enum):
    """What happened to the data."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    BULK_UPDATE = "bulk_update"
    RESPONSE_CHANGE = "response_change"
    DEPLOYMENT = "deployment"


class EventKind(str, Enum):
    """Valid domain/action combinations."""
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_BULK_UPDATE = "user:bulk_update"
    DATA_CREATE = "data:create"
    DATA_UPDATE = "data:update"
    DATA_DELETE = "data:delete"
    DATA_BULK_UPDATE = "data:bulk_update"
    API_UPDATE = "api:update"
    API_RESPONSE_CHANGE = "api:response_change"
    PERFORMANCE_UPDATE = "performance:update"
    GLOBAL_UPDATE = "global:update"
    GLOBAL_DEPLOYMENT = "global:deployment"

    @property
    def domain(self) -> EventDomain:
        return EventDomain(self.value.split(":", 1)[0])

    @property
    def action(self) -> EventAction:
        return EventAction(self.value.split(":", 1)[1])

    @classmethod
    def of(
        cls,
        domain: Union[EventDomain, str],
        action: Union[EventAction, str],
    ) -> Optional["EventKind"]:
        """Look up the kind for a domain/action pair, or None if not valid."""
        domain_value = domain.value if isinstance(domain, EventDomain) else str(domain)
        action_value = action.value if isinstance(action, EventAction) else str(action)
        try:
            return cls(f"{domain_value}:{action_value}")
        except ValueError:
            return None

    @classmethod
    def for_domain(cls, domain: Union[EventDomain, str]) -> FrozenSet["EventKind"]:
        """All kinds belonging to a domain."""
        domain = EventDomain(domain)
        return frozenset(kind for kind in cls if kind.domain is domain)

    @classmethod
    def parse(cls, event_key: str) -> FrozenSet["EventKind"]:
        """Expand an event key (``user:update`` or ``user:*``) to kinds.

        Raises:
            UnknownEventKindError: If the key names no known kind
        """
        domain, _, action = event_key.partition(":")
        if action == "*":
            try:
                return cls.for_domain(domain)
            except ValueError:
                raise UnknownEventKindError(event_key)

        kind = cls.of(domain, action)
        if kind is None:
            raise UnknownEventKindError(event_key)
        return frozenset({kind})
