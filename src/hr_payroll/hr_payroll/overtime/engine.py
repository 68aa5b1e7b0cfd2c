from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import at, minutes_between, next_day_cutoff, start_of_day
from ..common.validators import require_interval
from ..core.enums import DayType
from ..core.rules import OvertimeTierRules, WorkRules
from ..work_calendar.classifier import WorkCalendarClassifier, day_type_of
from .tiers.base import OvertimeTier, TieredOvertime
from .tiers.saturday_tier import SaturdayTier
from .tiers.sunday_tier import SundayTier
from .tiers.weekday_tier import WeekdayTier

HALF_HOUR_MINUTES = 30


class OvertimeEngine:
    """Two overtime models.

    `raw_minutes` is the approval-gated figure stored on attendance records
    (valued later at a flat multiplier). `tiered` and `interval_payable` use
    the day-type tier table for explicit intervals and what-if previews.
    """

    def __init__(
        self,
        classifier: WorkCalendarClassifier | None = None,
        tier_rules: OvertimeTierRules | None = None,
    ):
        self._classifier = classifier or WorkCalendarClassifier()
        self._tier_rules = tier_rules or OvertimeTierRules()
        self._tiers: dict[DayType, OvertimeTier] = {
            DayType.WEEKDAY: WeekdayTier(self._tier_rules),
            DayType.SATURDAY: SaturdayTier(self._tier_rules),
            DayType.SUNDAY: SundayTier(self._tier_rules),
        }

    @property
    def work_rules(self) -> WorkRules:
        return self._classifier.rules

    def tier_for(self, day_type: DayType) -> OvertimeTier:
        return self._tiers[DayType(day_type)]

    def _cap(self, moment: datetime, day: date) -> datetime:
        return min(moment, next_day_cutoff(day, self.work_rules.overtime_cutoff))

    def raw_minutes(
        self,
        check_out: Optional[datetime],
        day: date,
        overtime_approved: bool = False,
        sunday_approved: bool = False,
    ) -> int:
        if check_out is None:
            return 0

        window = self._classifier.classify(day)
        if window.day_type == DayType.SUNDAY:
            if not sunday_approved:
                return 0
            return max(0, minutes_between(start_of_day(day), self._cap(check_out, day)))

        if not overtime_approved:
            return 0
        return max(0, minutes_between(at(day, window.end_time), self._cap(check_out, day)))

    def tiered(self, checkout: datetime, day_type: DayType | None = None) -> TieredOvertime:
        if day_type is None:
            day_type = day_type_of(checkout.date())
        return self.tier_for(day_type).value_checkout(checkout)

    def interval_minutes(self, start: datetime, end: datetime, day: date) -> int:
        require_interval(start, end)
        return max(0, minutes_between(start, self._cap(end, day)))

    def interval_payable(self, start: datetime, end: datetime, day: date) -> float:
        """Payable hour-equivalents of an explicit interval, floored to half hours."""
        minutes = self.interval_minutes(start, end, day)
        hours = (minutes // HALF_HOUR_MINUTES) * HALF_HOUR_MINUTES / 60
        return self.tier_for(day_type_of(day)).value_hours(hours)
