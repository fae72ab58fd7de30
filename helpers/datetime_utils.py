"""Shared utilities for parsing command-line date/time input."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_date_input(value: str | None, *, today: Optional[date] = None) -> Optional[date]:
    """Parse ISO ``YYYY-MM-DD``, ``DD.MM.YYYY`` or the shortcuts ``today``/``tomorrow``."""

    if not value:
        return None
    text = value.strip().lower()
    if not text:
        return None

    base = today or date.today()
    if text == "today":
        return base
    if text == "tomorrow":
        return base + timedelta(days=1)

    for fmt in ("%Y-%m-%d", "%d.%m.%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_time_input(value: str | None) -> Optional[time]:
    """Parse ``HH:MM`` strings or the short ``hhmm`` form (``930`` -> 09:30)."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    for fmt in ("%H:%M", "%H.%M"):
        try:
            dt = datetime.strptime(text, fmt)
            return time(dt.hour, dt.minute)
        except ValueError:
            continue

    if len(text) in {3, 4} and text.isdigit():
        hours = _parse_int(text[:-2])
        minutes = _parse_int(text[-2:])
        if hours is not None and minutes is not None and 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes)

    return None


def parse_datetime_input(value: str | None, *, default_day: Optional[date] = None) -> Optional[datetime]:
    """Parse ``YYYY-MM-DDTHH:MM``, ``YYYY-MM-DD HH:MM`` or a bare time on ``default_day``."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    for sep in ("T", " "):
        if sep in text:
            raw_date, raw_time = text.split(sep, 1)
            parsed_date = parse_date_input(raw_date)
            parsed_time = parse_time_input(raw_time)
            if parsed_date and parsed_time:
                return datetime.combine(parsed_date, parsed_time)
            return None

    parsed_time = parse_time_input(text)
    if parsed_time is None:
        return None
    return datetime.combine(default_day or date.today(), parsed_time)


def parse_time_range(value: str | None) -> Optional[Tuple[time, time]]:
    """Parse ``09:00-18:00`` into a pair of times."""

    if not value or "-" not in value:
        return None
    raw_start, raw_end = value.split("-", 1)
    start = parse_time_input(raw_start)
    end = parse_time_input(raw_end)
    if start is None or end is None:
        return None
    return start, end


__all__ = [
    "parse_date_input",
    "parse_datetime_input",
    "parse_time_input",
    "parse_time_range",
]
