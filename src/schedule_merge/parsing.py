from __future__ import annotations

from datetime import datetime
from typing import Any

from .config import DT_FORMAT
from .errors import ScheduleFormatError


def parse_dt(s: str) -> datetime:
    """
    Parse datetime in format 'dd/mm/yyyy - HH:MM' (naive local time).
    ISO-8601 strings are accepted as a fallback; timestamps are only ever
    compared, never converted between zones.
    """
    try:
        return datetime.strptime(s, DT_FORMAT)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(s)
    except (TypeError, ValueError) as e:
        raise ScheduleFormatError(f"unparsable date {s!r} (expected {DT_FORMAT!r} or ISO-8601)") from e


def parse_desirability(value: Any) -> Any:
    # Numeros tal cual; cadenas como fecha (p.ej. fecha de creacion)
    if isinstance(value, str):
        return parse_dt(value)
    return value
