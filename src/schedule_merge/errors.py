from __future__ import annotations


class ScheduleMergeError(Exception):
    """Base class for every error raised by schedule_merge."""


class InvalidIntervalError(ScheduleMergeError, ValueError):
    """An event whose bounds do not satisfy start < end."""

    def __init__(self, start, end, event_id=None, index=None) -> None:
        self.start = start
        self.end = end
        self.event_id = event_id
        self.index = index

        where = ""
        if index is not None:
            where += f" at position {index}"
        if event_id is not None:
            where += f" (id={event_id!r})"
        super().__init__(f"invalid interval{where}: start {start!r} must be before end {end!r}")


class ScheduleFormatError(ScheduleMergeError, ValueError):
    """Malformed schedule input (missing keys, unparsable dates)."""
