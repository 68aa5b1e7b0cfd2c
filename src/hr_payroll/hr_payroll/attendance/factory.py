from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import at
from ..core.enums import DayType
from ..work_calendar.classifier import DayWindow
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.leave_strategy import OnLeaveStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.sunday_strategy import ApprovedSundayStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(
        self,
        *,
        check_in: Optional[datetime],
        window: DayWindow,
        sunday_approved: bool = False,
        on_leave: bool = False,
    ) -> AttendanceStrategy:
        if on_leave:
            return OnLeaveStrategy()
        if check_in is None:
            return AbsentStrategy()

        if window.day_type == DayType.SUNDAY:
            return ApprovedSundayStrategy() if sunday_approved else AbsentStrategy()

        if check_in > at(check_in.date(), window.late_threshold):
            return LateStrategy()
        return NormalStrategy()
