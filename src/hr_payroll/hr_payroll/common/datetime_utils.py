from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the business timezone, as a naive datetime.

    Wrapped so tests can patch it.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def at(day: date, t: time) -> datetime:
    return datetime.combine(day, t)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end (truncated), negative if end < start."""
    seconds = (end - start).total_seconds()
    if seconds >= 0:
        return int(seconds // 60)
    return -int(-seconds // 60)


def hours_between(start: datetime, end: datetime) -> float:
    return minutes_between(start, end) / 60


def next_day_cutoff(day: date, cutoff: time) -> datetime:
    return datetime.combine(day + timedelta(days=1), cutoff)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
