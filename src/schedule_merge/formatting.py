from __future__ import annotations

import math
from datetime import datetime
from typing import Any, List

from .config import DT_FORMAT


def ceil_seconds_to_minutes(seconds: int) -> int:
    """Ceil seconds to the next minute boundary (keeping seconds as int)."""
    if seconds <= 0:
        return 0
    return int(math.ceil(seconds / 60.0) * 60)


def fmt_duration_dhm(seconds: int) -> str:
    """
    Format as 'DD d HH h MM m', rounding UP seconds to minutes.
    """
    seconds = ceil_seconds_to_minutes(int(seconds))
    minutes = seconds // 60

    days = minutes // (24 * 60)
    minutes -= days * 24 * 60

    hours = minutes // 60
    minutes -= hours * 60

    return f"{days:02d} d {hours:02d} h {minutes:02d} m"


def fmt_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime(DT_FORMAT)
    return str(value)


def fmt_timeline(events: List[Any]) -> List[str]:
    """One line per entry: '[start, end)  duration  id=...'."""
    lines: List[str] = []
    for ev in events:
        span = f"[{fmt_timestamp(ev.start)}, {fmt_timestamp(ev.end)})"
        delta = ev.end - ev.start
        duration = fmt_duration_dhm(int(delta.total_seconds())) if hasattr(delta, "total_seconds") else str(delta)
        lines.append(f"{span}  {duration}  id={getattr(ev, 'event_id', None)}")
    return lines
