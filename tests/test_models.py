import dataclasses
from datetime import datetime, timedelta

import pytest

from schedule_merge.errors import InvalidIntervalError, ScheduleMergeError
from schedule_merge.models import Event, Schedule

BASE = datetime(2020, 1, 1)


def make_event(event_id, start_h, end_h, desirability=0):
    return Event(
        start=BASE + timedelta(hours=start_h),
        end=BASE + timedelta(hours=end_h),
        desirability=desirability,
        event_id=event_id,
    )


def test_rejects_inverted_and_empty_intervals() -> None:
    with pytest.raises(InvalidIntervalError):
        make_event(1, 2, 1)
    with pytest.raises(InvalidIntervalError) as exc:
        make_event(2, 1, 1)
    assert exc.value.event_id == 2
    assert isinstance(exc.value, ScheduleMergeError)
    assert isinstance(exc.value, ValueError)


def test_with_start_and_end_leave_receiver_untouched() -> None:
    ev = make_event("a", 0, 4)

    later = ev.with_start(BASE + timedelta(hours=1))
    earlier = ev.with_end(BASE + timedelta(hours=3))

    assert (ev.start, ev.end) == (BASE, BASE + timedelta(hours=4))
    assert later.start == BASE + timedelta(hours=1)
    assert earlier.end == BASE + timedelta(hours=3)
    assert later.event_id == earlier.event_id == "a"


def test_with_start_rejects_empty_result() -> None:
    ev = make_event("a", 0, 1)
    with pytest.raises(InvalidIntervalError):
        ev.with_start(ev.end)


def test_clone_is_deep() -> None:
    ev = make_event("a", 0, 1, desirability=5)
    ev.payload["tags"] = ["x"]

    dup = ev.clone()
    dup.payload["tags"].append("y")

    assert dup is not ev
    assert dup.payload == {"tags": ["x", "y"]}
    assert ev.payload == {"tags": ["x"]}
    assert (dup.start, dup.end, dup.desirability, dup.event_id) == (ev.start, ev.end, 5, "a")


def test_duration() -> None:
    assert make_event("a", 1, 2.5).duration == timedelta(hours=1, minutes=30)


def test_sort_by_desirability_is_stable() -> None:
    events = [
        make_event("late-tie", 0, 1, desirability=1),
        make_event("low", 0, 1, desirability=0),
        make_event("early-tie", 0, 1, desirability=1),
        make_event("high", 0, 1, desirability=2),
    ]
    schedule = Schedule(events)
    schedule.sort_by_desirability()

    assert [e.event_id for e in schedule.get_events()] == ["low", "late-tie", "early-tie", "high"]


def test_sort_with_custom_key() -> None:
    schedule = Schedule([make_event("a", 0, 1, 1), make_event("b", 0, 1, 2)], key=lambda e: -e.desirability)
    schedule.sort_by_desirability()
    assert [e.event_id for e in schedule] == ["b", "a"]


def test_get_events_is_a_snapshot() -> None:
    schedule = Schedule([make_event("a", 0, 1)])
    snapshot = schedule.get_events()

    schedule.add(make_event("b", 1, 2))
    snapshot.clear()

    assert len(schedule) == 2
    assert snapshot == []


def test_event_bounds_cannot_be_reassigned() -> None:
    ev = make_event("a", 0, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ev.start = ev.end
    assert ev.start == BASE
