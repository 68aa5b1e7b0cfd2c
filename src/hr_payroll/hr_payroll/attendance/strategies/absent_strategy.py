from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus, DayType
from ...work_calendar.classifier import DayWindow
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """No check-in, or Sunday presence nobody approved."""

    def decide(self, *, check_in: Optional[datetime], window: DayWindow) -> StatusDecision:
        note = None
        if check_in is not None and window.day_type == DayType.SUNDAY:
            note = "Sunday work awaiting approval"
        return StatusDecision(status=AttendanceStatus.ABSENT, note=note)
