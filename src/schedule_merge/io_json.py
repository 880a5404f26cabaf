from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from .errors import ScheduleFormatError
from .formatting import fmt_timestamp
from .models import Event, Schedule
from .parsing import parse_desirability, parse_dt

_RESERVED_KEYS = {"id", "start", "end", "desirability"}


def event_from_dict(data: Dict[str, Any], index: int = 0) -> Event:
    if not isinstance(data, dict):
        raise ScheduleFormatError(f"event #{index}: expected an object, got {type(data).__name__}")

    try:
        start = parse_dt(data["start"])
        end = parse_dt(data["end"])
    except KeyError as e:
        raise ScheduleFormatError(f"event #{index}: missing key {e.args[0]!r}") from e

    desirability = data.get("desirability", 0)
    if isinstance(desirability, bool) or not isinstance(desirability, (int, float, str)):
        raise ScheduleFormatError(f"event #{index}: desirability must be a number or a date, got {desirability!r}")

    return Event(
        start=start,
        end=end,
        desirability=parse_desirability(desirability),
        event_id=data.get("id", index),
        payload={k: v for k, v in data.items() if k not in _RESERVED_KEYS},
    )


def schedule_from_dict(data: Dict[str, Any]) -> Schedule:
    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        raise ScheduleFormatError("input must be an object with an 'events' list")

    schedule = Schedule()
    for idx, raw in enumerate(data["events"]):
        schedule.add(event_from_dict(raw, idx))

    # Todas numericas o todas fechas: si no, no se pueden ordenar
    kinds = {isinstance(ev.desirability, datetime) for ev in schedule}
    if len(kinds) > 1:
        raise ScheduleFormatError("desirability values mix numbers and dates")
    return schedule


def load_schedule(path: str) -> Schedule:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ScheduleFormatError(f"{path}: invalid JSON ({e})") from e
    return schedule_from_dict(data)


def event_to_dict(ev: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": getattr(ev, "event_id", None),
        "start": fmt_timestamp(ev.start),
        "end": fmt_timestamp(ev.end),
        "desirability": _jsonable(getattr(ev, "desirability", None)),
    }
    out.update(getattr(ev, "payload", {}) or {})
    return out


def timeline_to_dict(events: List[Any], policy: str, explain: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "policy": policy,
        "timeline": [event_to_dict(ev) for ev in events],
    }
    if explain is not None:
        out["explain"] = explain
    return out


def dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2, default=_jsonable)


def dump_timeline(path: str, data: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps(data))
        f.write("\n")


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return fmt_timestamp(value)
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
