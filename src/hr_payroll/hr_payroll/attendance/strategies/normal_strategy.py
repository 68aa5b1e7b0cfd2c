from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import at, minutes_between
from ...core.enums import AttendanceStatus
from ...work_calendar.classifier import DayWindow
from .base import AttendanceStrategy, StatusDecision


def late_minutes_from_start(check_in: datetime, window: DayWindow) -> int:
    """Whole minutes past the work start, never negative."""
    if window.start_time is None:
        return 0
    return max(0, minutes_between(at(check_in.date(), window.start_time), check_in))


class NormalStrategy(AttendanceStrategy):
    """Check-in at or before the late threshold.

    Minutes after the work start are still recorded, the status stays ON_TIME.
    """

    def decide(self, *, check_in: Optional[datetime], window: DayWindow) -> StatusDecision:
        minutes = late_minutes_from_start(check_in, window) if check_in else 0
        return StatusDecision(status=AttendanceStatus.ON_TIME, late_minutes=minutes)
