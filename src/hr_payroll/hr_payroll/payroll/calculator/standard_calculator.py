from __future__ import annotations

from ...core.enums import LateDeductionMode
from ...core.rules import PayrollRules
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: 1% of the daily rate per late minute, at most one day's pay."""

    def late_deduction(self, *, daily_rate: float, late_minutes: int) -> float:
        amount = daily_rate * (self._rules.late_percent_per_minute / 100) * max(0, int(late_minutes))
        return min(amount, daily_rate)


class FlatLatePenaltyCalculator(PayrollCalculator):
    """Fixed fee per late day, regardless of minutes."""

    def late_deduction(self, *, daily_rate: float, late_minutes: int) -> float:
        return float(self._rules.late_penalty_flat)


def calculator_for(rules: PayrollRules) -> PayrollCalculator:
    if rules.late_deduction_mode == LateDeductionMode.FLAT:
        return FlatLatePenaltyCalculator(rules)
    return StandardPayrollCalculator(rules)
