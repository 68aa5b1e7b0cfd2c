from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from ...core.rules import OvertimeTierRules


@dataclass(frozen=True)
class TieredOvertime:
    """Result of valuing one worked day with the tier table.

    Hour figures are hour-equivalents after multipliers, except
    `raw_overtime_hours` which is the real overtime duration.
    """

    normal_hours: float
    overtime_payable_hours: float
    raw_overtime_hours: float
    total_payable_hours: float
    breakdown: tuple[str, ...] = field(default_factory=tuple)


class OvertimeTier(ABC):
    """Strategy Pattern: one multiplier table per day type."""

    def __init__(self, rules: OvertimeTierRules):
        self._rules = rules

    @abstractmethod
    def value_checkout(self, checkout: datetime) -> TieredOvertime:
        """Value a whole day that ends at `checkout`."""

        raise NotImplementedError

    @abstractmethod
    def value_hours(self, hours: float) -> float:
        """Payable hour-equivalents of an explicit overtime interval of `hours`."""

        raise NotImplementedError

    def _without_break(self, hours: float) -> float:
        if hours > self._rules.weekend_short_day_hours:
            return hours - self._rules.weekend_break_hours
        return hours
