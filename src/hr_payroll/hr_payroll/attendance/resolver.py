from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.rules import WorkRules
from ..work_calendar.classifier import WorkCalendarClassifier
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision


class AttendanceStatusResolver:
    """Turns a check-in timestamp and a date into an attendance status.

    `check_in` is read as a wall-clock time on `day`; late minutes are counted
    from the work start of that day, the LATE status from the late threshold.
    """

    def __init__(
        self,
        classifier: WorkCalendarClassifier | None = None,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._classifier = classifier or WorkCalendarClassifier()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def rules(self) -> WorkRules:
        return self._classifier.rules

    def resolve(
        self,
        check_in: Optional[datetime],
        day: date,
        sunday_approved: bool = False,
        *,
        on_leave: bool = False,
    ) -> StatusDecision:
        window = self._classifier.classify(day)
        if check_in is not None and check_in.date() != day:
            check_in = datetime.combine(day, check_in.time())

        strategy = self._factory.for_checkin(
            check_in=check_in,
            window=window,
            sunday_approved=sunday_approved,
            on_leave=on_leave,
        )
        return strategy.decide(check_in=check_in, window=window)

    def late_penalty(self, status: AttendanceStatus) -> float:
        if status == AttendanceStatus.LATE:
            return float(self.rules.late_penalty_flat)
        return 0.0
