from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_calendar.classifier import DayWindow
from .base import AttendanceStrategy, StatusDecision
from .normal_strategy import late_minutes_from_start


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide(self, *, check_in: Optional[datetime], window: DayWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, late_minutes=late_minutes_from_start(check_in, window))
