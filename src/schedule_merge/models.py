from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, Iterator, List, Literal, Optional

from .errors import InvalidIntervalError


Action = Literal["inserted", "superseded", "trimmed", "split"]


@dataclass(frozen=True)
class Event:
    """
    One scheduling candidate, bounded as [start, end).

    Callers should treat events as immutable; with_start/with_end/clone
    always hand back a new instance carrying the same id and payload.
    """

    start: datetime
    end: datetime
    desirability: Any = 0
    event_id: Any = None
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise InvalidIntervalError(self.start, self.end, event_id=self.event_id)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def clone(self) -> "Event":
        return replace(self, payload=copy.deepcopy(self.payload))

    def with_start(self, t: datetime) -> "Event":
        return replace(self, start=t, payload=copy.deepcopy(self.payload))

    def with_end(self, t: datetime) -> "Event":
        return replace(self, end=t, payload=copy.deepcopy(self.payload))


DesirabilityKey = Callable[[Any], Any]


def _by_desirability(event: Any) -> Any:
    return event.desirability


class Schedule:
    """
    Ordered collection of events that can reorder itself by desirability.

    The sort is stable: among equally desirable events the one added later
    stays later, and is therefore folded last (it wins).
    """

    def __init__(self, events: Optional[Iterable[Any]] = None, key: Optional[DesirabilityKey] = None) -> None:
        self._events: List[Any] = list(events) if events is not None else []
        self._key = key or _by_desirability

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._events))

    def add(self, event: Any) -> None:
        self._events.append(event)

    def sort_by_desirability(self, key: Optional[DesirabilityKey] = None) -> None:
        self._events.sort(key=key or self._key)

    def get_events(self) -> List[Any]:
        return list(self._events)


@dataclass(frozen=True)
class Decision:
    # Evidencia de lo que el motor hizo con cada evento en conflicto
    event_id: Any
    action: Action
    against: Any = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
