from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Tuple


def local_now() -> datetime:
    """Naive wall-clock time; the planner works in local time only."""
    return datetime.now()


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def at_clock(day: date | datetime, hour: int, minute: int) -> datetime:
    """Wall-clock instant on the calendar day of ``day``."""
    return datetime.combine(as_date(day), time(hour, minute))


def day_bounds(day: date | datetime) -> Tuple[datetime, datetime]:
    start = datetime.combine(as_date(day), time.min)
    return start, start + timedelta(days=1)


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """Half-open overlap test: touching endpoints do not overlap."""
    return a_start < b_end and a_end > b_start


def format_clock(value: datetime) -> str:
    """Format as ``5:00 PM``."""
    hour = value.hour
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour - 12 if hour > 12 else (12 if hour == 0 else hour)
    return f"{display_hour}:{value.minute:02d} {period}"


def format_range(start: datetime, end: datetime) -> str:
    return f"{format_clock(start)} - {format_clock(end)}"


__all__ = [
    "as_date",
    "at_clock",
    "day_bounds",
    "format_clock",
    "format_range",
    "intervals_overlap",
    "local_now",
]
