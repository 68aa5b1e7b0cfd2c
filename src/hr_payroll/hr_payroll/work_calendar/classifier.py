from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import DayType
from ..core.rules import WorkRules


@dataclass(frozen=True)
class DayWindow:
    """Attendance window of one calendar date.

    Sunday has no normal window: start/end/late threshold are None.
    """

    day_type: DayType
    start_time: Optional[time]
    end_time: Optional[time]
    late_threshold: Optional[time]

    @property
    def is_workday(self) -> bool:
        return self.day_type != DayType.SUNDAY


def day_type_of(day: date) -> DayType:
    # isoweekday: Monday=1 .. Sunday=7, so % 7 gives 0=Sunday, 6=Saturday.
    weekday = day.isoweekday() % 7
    if weekday == 0:
        return DayType.SUNDAY
    if weekday == 6:
        return DayType.SATURDAY
    return DayType.WEEKDAY


class WorkCalendarClassifier:
    def __init__(self, rules: Optional[WorkRules] = None):
        self._rules = rules or WorkRules()

    @property
    def rules(self) -> WorkRules:
        return self._rules

    def classify(self, day: date) -> DayWindow:
        if isinstance(day, datetime):
            day = day.date()

        day_type = day_type_of(day)
        if day_type == DayType.SUNDAY:
            return DayWindow(day_type=day_type, start_time=None, end_time=None, late_threshold=None)
        if day_type == DayType.SATURDAY:
            return DayWindow(
                day_type=day_type,
                start_time=self._rules.saturday_start,
                end_time=self._rules.saturday_end,
                late_threshold=self._rules.late_threshold,
            )
        return DayWindow(
            day_type=day_type,
            start_time=self._rules.weekday_start,
            end_time=self._rules.weekday_end,
            late_threshold=self._rules.late_threshold,
        )
