# barberbook/core.py
"""Time arithmetic shared by the availability engine and the reservation writer.

All values are calendar-naive: a date is the local calendar day and a
time is a wall-clock "HH:MM". Nothing here knows about timezones.
"""

import re
from datetime import date, datetime, time
from typing import Union

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MINUTES_PER_DAY = 24 * 60


class ParseError(ValueError):
    """Raised for a malformed time or date value."""


def parse_hhmm(value: Union[str, time]) -> int:
    """Return minutes since midnight for "HH:MM" or "HH:MM:SS".

    Seconds are truncated. A ``datetime.time`` is accepted as well, since
    that is what the store hands back.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise ParseError(f"Expected a time string, got {type(value).__name__}")

    match = _TIME_RE.match(value.strip())
    if match is None:
        raise ParseError(f"Malformed time: {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ParseError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute value out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_time(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute value out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def parse_date(value: Union[str, date]) -> date:
    """Parse "YYYY-MM-DD" into a naive calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise ParseError(f"Malformed date: {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ParseError(f"Invalid date: {value!r}") from None


def weekday_of(day: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open interval overlap: [a_start, a_end) vs [b_start, b_end)."""
    return a_start < b_end and b_start < a_end
