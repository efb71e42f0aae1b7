# barberbook/availability.py
"""
Slot availability for one barber on one day.

Everything here is a pure function of its arguments: working-hour
windows, the intervals already reserved, and the service duration. The
caller fetches those (see barberbook.repository) and passes them in.

A slot is a start time. Slots step by the service duration from the start
of each window and must end inside that same window, so two contiguous
windows never produce a slot that straddles them.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from barberbook.config import settings
from barberbook.core import format_hhmm, overlaps, parse_date, parse_hhmm, weekday_of
from barberbook.schemas import AppointmentInterval, WorkingHourWindow

logger = logging.getLogger(__name__)


def effective_slot_minutes(service_duration: Optional[int]) -> int:
    """Slot length for a service; unset or non-positive falls back to the default."""
    if service_duration is None or service_duration <= 0:
        return settings.booking.default_slot_minutes
    return int(service_duration)


def windows_for_day(
    windows: Iterable[WorkingHourWindow],
    on_date: date,
    barber_id: Optional[int],
) -> List[WorkingHourWindow]:
    """Windows on the weekday of ``on_date`` that apply to ``barber_id``."""
    weekday = weekday_of(on_date)
    return [
        w for w in windows
        if w.weekday == weekday and (w.barber_id is None or w.barber_id == barber_id)
    ]


def candidate_starts(windows: Iterable[WorkingHourWindow], slot_minutes: int) -> List[int]:
    """Sorted, deduplicated start minutes that fit entirely inside a window."""
    starts = set()
    for w in windows:
        window_start = parse_hhmm(w.start_time)
        window_end = parse_hhmm(w.end_time)
        t = window_start
        while t + slot_minutes <= window_end:
            starts.add(t)
            t += slot_minutes
    return sorted(starts)


def is_slot_free(start: int, slot_minutes: int, intervals: Iterable[AppointmentInterval]) -> bool:
    for interval in intervals:
        if not interval.status.blocks_slot:
            continue
        if overlaps(start, start + slot_minutes, interval.start_minute, interval.end_minute):
            return False
    return True


def compute_available_slots(
    on_date,
    barber_id: Optional[int],
    service_duration: Optional[int],
    windows: Iterable[WorkingHourWindow],
    existing_intervals: Iterable[AppointmentInterval],
) -> List[str]:
    """Ordered "HH:MM" start times a client can book.

    ``on_date`` may be a ``date`` or a "YYYY-MM-DD" string. Canceled
    intervals in ``existing_intervals`` do not block. Malformed times
    raise ParseError.
    """
    day = parse_date(on_date)
    slot_minutes = effective_slot_minutes(service_duration)
    todays = windows_for_day(windows, day, barber_id)
    if not todays:
        return []

    busy = list(existing_intervals)
    free = [t for t in candidate_starts(todays, slot_minutes) if is_slot_free(t, slot_minutes, busy)]

    logger.debug(
        "Availability barber=%s date=%s slot=%smin windows=%d busy=%d free=%d",
        barber_id, day, slot_minutes, len(todays), len(busy), len(free),
    )
    return [format_hhmm(t) for t in free]
