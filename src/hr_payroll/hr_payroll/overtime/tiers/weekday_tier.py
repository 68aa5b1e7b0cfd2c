from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import at, hours_between
from .base import OvertimeTier, TieredOvertime


class WeekdayTier(OvertimeTier):
    """Normal day credited in full; after the work end the first hour is x1.5, the rest x2.0."""

    def _split(self, hours: float) -> tuple[float, float]:
        first = min(hours, 1.0)
        return first, max(0.0, hours - first)

    def value_hours(self, hours: float) -> float:
        if hours <= 0:
            return 0.0
        first, rest = self._split(hours)
        r = self._rules
        return first * r.weekday_first_hour_multiplier + rest * r.weekday_next_hours_multiplier

    def value_checkout(self, checkout: datetime) -> TieredOvertime:
        r = self._rules
        normal = float(r.weekday_normal_hours)
        breakdown = [f"Normal hours: {normal:g}"]

        excess = max(0.0, hours_between(at(checkout.date(), r.weekday_end), checkout))
        payable = self.value_hours(excess)
        if excess > 0:
            first, rest = self._split(excess)
            breakdown.append(f"First overtime hour: {first:.2f} x {r.weekday_first_hour_multiplier:g}")
            if rest > 0:
                breakdown.append(f"Further overtime: {rest:.2f} x {r.weekday_next_hours_multiplier:g}")

        return TieredOvertime(
            normal_hours=normal,
            overtime_payable_hours=payable,
            raw_overtime_hours=excess,
            total_payable_hours=normal + payable,
            breakdown=tuple(breakdown),
        )
