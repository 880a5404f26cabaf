from __future__ import annotations

import logging
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_TRIM_OVERLAPS, POLICY_NAMES
from .errors import InvalidIntervalError
from .intervals import Relation, classify, fragment
from .models import Action, Decision, DesirabilityKey, Schedule

logger = logging.getLogger(__name__)


class Placement(Enum):
    PENDING = "pending"
    PLACED = "placed"


class _Splice:
    """
    Output of a single insertion step: the spliced middle of the timeline.

    The new event is appended exactly once, the first time place() is
    called; later calls are no-ops.
    """

    def __init__(self, event: Any) -> None:
        self.event = event
        self.state = Placement.PENDING
        self.out: List[Any] = []

    def place(self) -> None:
        if self.state is Placement.PENDING:
            self.out.append(self.event)
            self.state = Placement.PLACED

    def emit(self, piece: Optional[Any]) -> None:
        if piece is not None:
            self.out.append(piece)

    def extend(self, pieces: Sequence[Any]) -> None:
        self.out.extend(pieces)


def _split_untouched(event: Any, resolved: List[Any]) -> Tuple[List[Any], List[Any]]:
    """
    Split `resolved` into the prefix that ends at or before event.start and
    the candidate run that may overlap it.
    """
    idx = 0
    for idx, entry in enumerate(resolved):
        if not entry.end <= event.start:
            break
    else:
        return list(resolved), []
    return resolved[:idx], resolved[idx:]


class MergeEngine:
    """
    Fold desirability-ordered events into a conflict-free timeline.

    `pending` is consumed least desirable first. After every step `resolved`
    is sorted by start and pairwise non-overlapping. With trim_overlaps the
    loser of a conflict keeps whatever it still can occupy; otherwise it is
    dropped.
    """

    def __init__(
        self,
        schedule: Union[Schedule, Iterable[Any]],
        trim_overlaps: bool = DEFAULT_TRIM_OVERLAPS,
        key: Optional[DesirabilityKey] = None,
    ) -> None:
        if not hasattr(schedule, "sort_by_desirability"):
            schedule = Schedule(schedule)

        if key is not None:
            schedule.sort_by_desirability(key=key)
        else:
            schedule.sort_by_desirability()

        self.pending: List[Any] = list(schedule.get_events())
        self.trim_overlaps = bool(trim_overlaps)
        self.decisions: List[Decision] = []
        self._resolved: List[Any] = []
        self._merged = False

        for idx, ev in enumerate(self.pending):
            if not ev.start < ev.end:
                raise InvalidIntervalError(ev.start, ev.end, event_id=getattr(ev, "event_id", None), index=idx)

    @property
    def policy(self) -> str:
        return POLICY_NAMES[self.trim_overlaps]

    @property
    def resolved(self) -> List[Any]:
        return list(self._resolved)

    @property
    def is_merged(self) -> bool:
        return self._merged

    def merge(self) -> List[Any]:
        if self._merged:
            return self.resolved

        for event in self.pending:
            untouched, candidates = _split_untouched(event, self._resolved)
            if not candidates:
                # nothing can overlap: append after the untouched prefix
                self._resolved = untouched + [event]
                self._record(event, "inserted")
                logger.debug(
                    "folded %r [%s, %s): appended after %d untouched entries",
                    _event_id(event), event.start, event.end, len(untouched),
                )
                continue

            middle = self._splice(event, candidates)
            self._resolved = untouched + middle

            logger.debug(
                "folded %r [%s, %s): %d untouched, %d candidates -> %d entries",
                _event_id(event), event.start, event.end, len(untouched), len(candidates), len(middle),
            )

        self._merged = True
        logger.info(
            "merged %d events into %d entries (policy=%s)",
            len(self.pending), len(self._resolved), self.policy,
        )
        return self.resolved

    def _splice(self, event: Any, candidates: List[Any]) -> List[Any]:
        splice = _Splice(event)
        ns, ne = event.start, event.end
        winner = _event_id(event)

        for idx, cand in enumerate(candidates):
            cs, ce = cand.start, cand.end
            relation = classify(event, cand)

            if relation is Relation.BEFORE:
                splice.place()
                splice.extend(candidates[idx:])
                break

            if relation is Relation.AFTER:
                splice.emit(cand)
                continue

            if relation is Relation.COVERS:
                splice.place()
                self._record(cand, "superseded", against=winner)
                continue

            if relation is Relation.INSIDE:
                if self.trim_overlaps:
                    left = fragment(cand, cs, ns)
                    right = fragment(cand, ne, ce)
                    splice.emit(left)
                    splice.place()
                    splice.emit(right)
                    self._record_pieces(cand, winner, [p for p in (left, right) if p is not None])
                else:
                    splice.place()
                    self._record(cand, "superseded", against=winner)
                splice.extend(candidates[idx + 1:])
                break

            if relation is Relation.OVERLAPS_START:
                splice.place()
                if self.trim_overlaps:
                    right = fragment(cand, ne, ce)
                    splice.emit(right)
                    self._record_pieces(cand, winner, [right])
                else:
                    self._record(cand, "superseded", against=winner)
                continue

            # OVERLAPS_END: the new event may still reach later candidates
            if self.trim_overlaps:
                left = fragment(cand, cs, ns)
                splice.emit(left)
                self._record_pieces(cand, winner, [left])
            else:
                self._record(cand, "superseded", against=winner)

        splice.place()
        self._record(event, "inserted")
        return splice.out

    def _record(self, event: Any, action: Action, against: Any = None) -> None:
        if action == "inserted":
            self.decisions.append(Decision(_event_id(event), action, start=event.start, end=event.end))
        else:
            self.decisions.append(Decision(_event_id(event), action, against=against))

    def _record_pieces(self, cand: Any, winner: Any, pieces: List[Any]) -> None:
        if not pieces:
            self._record(cand, "superseded", against=winner)
            return
        action: Action = "split" if len(pieces) > 1 else "trimmed"
        for piece in pieces:
            self.decisions.append(
                Decision(_event_id(cand), action, against=winner, start=piece.start, end=piece.end)
            )

    def explain(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "merged": self._merged,
            "input_order": [_event_id(e) for e in self.pending],
            "decisions": [asdict(d) for d in self.decisions],
            "timeline": [
                {"id": _event_id(e), "start": e.start, "end": e.end} for e in self._resolved
            ],
        }


def _event_id(event: Any) -> Any:
    return getattr(event, "event_id", None)


def merge_events(
    events: Union[Schedule, Iterable[Any]],
    trim_overlaps: bool = DEFAULT_TRIM_OVERLAPS,
    key: Optional[DesirabilityKey] = None,
) -> List[Any]:
    return MergeEngine(events, trim_overlaps=trim_overlaps, key=key).merge()
