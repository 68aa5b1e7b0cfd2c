from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import at, hours_between
from .base import OvertimeTier, TieredOvertime


class SaturdayTier(OvertimeTier):
    """Short Saturday pays double in full; a long one pays the normal block double and the rest single."""

    def value_hours(self, hours: float) -> float:
        if hours <= 0:
            return 0.0
        r = self._rules
        effective = self._without_break(hours)
        first = min(effective, r.saturday_normal_hours)
        rest = max(0.0, effective - r.saturday_normal_hours)
        return first * r.weekend_multiplier + rest * r.saturday_overtime_multiplier

    def value_checkout(self, checkout: datetime) -> TieredOvertime:
        r = self._rules
        worked = max(0.0, hours_between(at(checkout.date(), r.estimator_day_start), checkout))

        if worked <= r.weekend_short_day_hours:
            pay = worked * r.weekend_multiplier
            return TieredOvertime(
                normal_hours=worked,
                overtime_payable_hours=0.0,
                raw_overtime_hours=0.0,
                total_payable_hours=pay,
                breakdown=(f"Short Saturday: {worked:.2f} x {r.weekend_multiplier:g}",),
            )

        normal = float(r.saturday_normal_hours)
        normal_pay = normal * r.weekend_multiplier
        overtime = max(0.0, worked - r.weekend_break_hours - normal)
        overtime_pay = overtime * r.saturday_overtime_multiplier

        breakdown = [f"Saturday normal: {normal:g} x {r.weekend_multiplier:g}"]
        if overtime > 0:
            breakdown.append(f"Saturday overtime: {overtime:.2f} x {r.saturday_overtime_multiplier:g}")

        return TieredOvertime(
            normal_hours=normal,
            overtime_payable_hours=overtime_pay,
            raw_overtime_hours=overtime,
            total_payable_hours=normal_pay + overtime_pay,
            breakdown=tuple(breakdown),
        )
