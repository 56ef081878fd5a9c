"""Invalidation rule entity."""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterable, Optional, Tuple

from ..value_objects.event_kind import EventKind
from .invalidation_event import InvalidationEvent


RuleCondition = Callable[[InvalidationEvent], bool]


@dataclass(frozen=True)
class InvalidationRule:
    """Maps a set of event kinds to cache patterns to clear.

    Every pattern is applied to every cache name listed in the rule.

    Attributes:
        event_key: Human readable key the rule was declared with
        kinds: Event kinds that trigger the rule
        cache_patterns: Regular expressions matched against cache keys
        cache_names: Named caches the patterns are applied to
        delay_ms: Optional wait before the rule is applied
        condition: Optional predicate; the rule is skipped when it returns False
    """

    event_key: str
    kinds: FrozenSet[EventKind]
    cache_patterns: Tuple[str, ...]
    cache_names: Tuple[str, ...]
    delay_ms: Optional[int] = None
    condition: Optional[RuleCondition] = field(default=None, compare=False)

    @classmethod
    def for_event(
        cls,
        event_key: str,
        cache_patterns: Iterable[str],
        cache_names: Iterable[str],
        delay_ms: Optional[int] = None,
        condition: Optional[RuleCondition] = None,
    ) -> "InvalidationRule":
        """Build a rule from an event key such as ``user:update`` or ``user:*``."""
        return cls(
            event_key=event_key,
            kinds=EventKind.parse(event_key),
            cache_patterns=tuple(cache_patterns),
            cache_names=tuple(cache_names),
            delay_ms=delay_ms,
            condition=condition,
        )

    def applies_to(self, kind: Optional[EventKind]) -> bool:
        return kind is not None and kind in self.kinds

    def targets(self, cache_names: Optional[Iterable[str]] = None) -> Iterable[Tuple[str, str]]:
        """Every (pattern, cache_name) pair of the rule.

        ``cache_names`` replaces the rule's own names, e.g. once a wildcard
        name has been expanded.
        """
        names = tuple(cache_names) if cache_names is not None else self.cache_names
        for pattern in self.cache_patterns:
            for cache_name in names:
                yield pattern, cache_name
