from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_calendar.classifier import DayWindow
from .base import AttendanceStrategy, StatusDecision


class OnLeaveStrategy(AttendanceStrategy):
    def decide(self, *, check_in: Optional[datetime], window: DayWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_LEAVE, note="Approved leave")
