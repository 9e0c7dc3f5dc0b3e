"""Clock-time parsing and worked-duration arithmetic.

Times of day are plain ``datetime.time`` values. A shift is assumed to start
and end on the same calendar day unless clock-out is not after clock-in, in
which case it is taken to cross midnight exactly once. Shifts of 24 hours or
more cannot be represented and wrap.
"""

from __future__ import annotations

import re
from datetime import time
from typing import Optional

from ..core.constants import NOT_AVAILABLE, SECONDS_PER_DAY
from ..core.exceptions import InvalidTimeFormat, ValidationError

_CLOCK_24H_RE = re.compile(r"^(\d{2}):(\d{2})$")
_TIME_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])$")


def parse_clock_time(raw: str) -> time:
    """Strict ``HH:MM`` (24-hour) as submitted by the self-service form."""
    value = (raw or "").strip()
    m = _CLOCK_24H_RE.match(value)
    if not m:
        raise InvalidTimeFormat("Time must be in HH:MM format.")
    return _build_time(int(m.group(1)), int(m.group(2)), 0, raw)


def normalize_time(raw: str) -> time:
    """Accept 24-hour ``HH:MM[:SS]`` or 12-hour ``H:MM[:SS] AM/PM``."""
    value = (raw or "").strip()

    m = _TIME_12H_RE.match(value)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        second = int(m.group(3) or 0)
        if not 1 <= hour <= 12:
            raise InvalidTimeFormat(f"Invalid time: {raw!r}")
        hour = hour % 12
        if m.group(4).lower() == "pm":
            hour += 12
        return _build_time(hour, minute, second, raw)

    m = _TIME_24H_RE.match(value)
    if m:
        return _build_time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0), raw)

    raise InvalidTimeFormat(f"Invalid time: {raw!r}")


def _build_time(hour: int, minute: int, second: int, raw: str) -> time:
    try:
        return time(hour=hour, minute=minute, second=second)
    except ValueError:
        raise InvalidTimeFormat(f"Invalid time: {raw!r}")


def _seconds_of_day(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def compute_worked_hours(clock_in: time, clock_out: time, break_minutes: int) -> float:
    """Net worked hours, never negative."""
    if break_minutes is None or int(break_minutes) < 0:
        raise ValidationError("Break duration cannot be negative.")

    start = _seconds_of_day(clock_in)
    end = _seconds_of_day(clock_out)
    if end <= start:
        end += SECONDS_PER_DAY

    worked_seconds = (end - start) - int(break_minutes) * 60
    return max(worked_seconds / 3600, 0.0)


def format_duration(hours: Optional[float]) -> str:
    if hours is None:
        return NOT_AVAILABLE
    total_minutes = max(int(round(float(hours) * 60)), 0)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_clock(value: Optional[time]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return value.strftime("%H:%M")
