from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Relation(Enum):
    """
    Position of a new (more desirable) interval relative to an existing one.

    new = [ns, ne), cand = [cs, ce):

        BEFORE          new:  [----)                ne <= cs
                        cand:       [----)
        AFTER           new:        [----)          ns >= ce
                        cand: [----)
        COVERS          new:  [--------)            ns <= cs and ce <= ne
                        cand:   [----)
        INSIDE          new:    [----)              cs <= ns and ne <= ce
                        cand: [--------)
        OVERLAPS_START  new:  [----)                ns < cs < ne < ce
                        cand:    [----)
        OVERLAPS_END    new:     [----)             cs < ns < ce < ne
                        cand: [----)
    """

    BEFORE = "before"
    AFTER = "after"
    COVERS = "covers"
    INSIDE = "inside"
    OVERLAPS_START = "overlaps_start"
    OVERLAPS_END = "overlaps_end"


def classify(new: Any, cand: Any) -> Relation:
    """
    Classify `new` against `cand` under half-open semantics.

    Shared boundaries always resolve to a containment relation (COVERS wins
    exact matches), never to a partial overlap.
    """
    ns, ne = new.start, new.end
    cs, ce = cand.start, cand.end

    if ne <= cs:
        return Relation.BEFORE
    if ns >= ce:
        return Relation.AFTER
    if ns <= cs and ce <= ne:
        return Relation.COVERS
    if cs <= ns and ne <= ce:
        return Relation.INSIDE
    if ns < cs:
        return Relation.OVERLAPS_START
    return Relation.OVERLAPS_END


def overlaps(a: Any, b: Any) -> bool:
    return a.start < b.end and b.start < a.end


def fragment(event: Any, start: Any, end: Any) -> Optional[Any]:
    """
    Clone of `event` bounded to [start, end). If that is empty, return None.
    """
    if not start < end:
        return None
    if start == event.start and end == event.end:
        return event.clone()
    # move the boundary that keeps the intermediate clone non-empty first
    if start < event.end:
        return event.with_start(start).with_end(end)
    return event.with_end(end).with_start(start)
