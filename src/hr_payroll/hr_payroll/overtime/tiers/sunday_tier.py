from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import at, hours_between
from .base import OvertimeTier, TieredOvertime


class SundayTier(OvertimeTier):
    """Every Sunday hour is overtime at x2.0, less the break on long days."""

    def value_hours(self, hours: float) -> float:
        if hours <= 0:
            return 0.0
        return self._without_break(hours) * self._rules.weekend_multiplier

    def value_checkout(self, checkout: datetime) -> TieredOvertime:
        r = self._rules
        worked = max(0.0, hours_between(at(checkout.date(), r.estimator_day_start), checkout))
        effective = self._without_break(worked)
        pay = effective * r.weekend_multiplier
        return TieredOvertime(
            normal_hours=0.0,
            overtime_payable_hours=pay,
            raw_overtime_hours=effective,
            total_payable_hours=pay,
            breakdown=(f"Sunday work: {effective:.2f} x {r.weekend_multiplier:g}",),
        )
