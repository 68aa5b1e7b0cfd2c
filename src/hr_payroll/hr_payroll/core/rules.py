from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any

from . import constants as c
from .enums import LateDeductionMode
from .exceptions import ValidationError


@dataclass(frozen=True)
class WorkRules:
    """Attendance windows and late rules.

    `saturday_end` is the administrative attendance window. The overtime tier
    table keeps its own Saturday baseline (see OvertimeTierRules).
    """

    weekday_start: time = c.WEEKDAY_START
    weekday_end: time = c.WEEKDAY_END
    saturday_start: time = c.SATURDAY_START
    saturday_end: time = c.SATURDAY_END
    late_threshold: time = c.LATE_THRESHOLD
    overtime_cutoff: time = c.OVERTIME_CUTOFF_NEXT_DAY
    late_penalty_flat: float = c.LATE_PENALTY_FLAT


@dataclass(frozen=True)
class OvertimeTierRules:
    estimator_day_start: time = c.ESTIMATOR_DAY_START
    weekday_end: time = c.WEEKDAY_END
    weekday_normal_hours: float = c.WEEKDAY_NORMAL_HOURS
    weekday_first_hour_multiplier: float = c.WEEKDAY_FIRST_HOUR_MULTIPLIER
    weekday_next_hours_multiplier: float = c.WEEKDAY_NEXT_HOURS_MULTIPLIER
    saturday_baseline_end: time = c.SATURDAY_OVERTIME_BASELINE_END
    saturday_normal_hours: float = c.SATURDAY_NORMAL_HOURS
    saturday_overtime_multiplier: float = c.SATURDAY_OVERTIME_MULTIPLIER
    weekend_short_day_hours: float = c.WEEKEND_SHORT_DAY_HOURS
    weekend_break_hours: float = c.WEEKEND_BREAK_HOURS
    weekend_multiplier: float = c.WEEKEND_MULTIPLIER


@dataclass(frozen=True)
class PayrollRules:
    working_days_per_month: int = c.WORKING_DAYS_PER_MONTH
    monthly_work_hours: int = c.MONTHLY_WORK_HOURS
    late_percent_per_minute: float = c.LATE_DEDUCTION_PERCENT_PER_MINUTE
    absence_percent: float = c.ABSENCE_DEDUCTION_PERCENT
    overtime_flat_multiplier: float = c.OVERTIME_FLAT_MULTIPLIER
    late_deduction_mode: LateDeductionMode = LateDeductionMode.PROPORTIONAL
    late_penalty_flat: float = c.LATE_PENALTY_FLAT


@dataclass(frozen=True)
class RuleSet:
    work: WorkRules
    overtime: OvertimeTierRules
    payroll: PayrollRules
    timezone: str = c.DEFAULT_TIMEZONE


def _parse_hhmm(value: Any, field_name: str) -> time:
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM, got {value!r}")


def build_rules(settings: Any) -> RuleSet:
    """Build the immutable rule set from a settings module.

    Missing attributes fall back to the defaults in `core.constants`.
    """

    def opt(name: str, default: Any) -> Any:
        return getattr(settings, name, default)

    late_fee = float(opt("LATE_PENALTY_FLAT", c.LATE_PENALTY_FLAT))
    work = WorkRules(
        weekday_start=_parse_hhmm(opt("WEEKDAY_START", c.WEEKDAY_START), "WEEKDAY_START"),
        weekday_end=_parse_hhmm(opt("WEEKDAY_END", c.WEEKDAY_END), "WEEKDAY_END"),
        saturday_start=_parse_hhmm(opt("SATURDAY_START", c.SATURDAY_START), "SATURDAY_START"),
        saturday_end=_parse_hhmm(opt("SATURDAY_END", c.SATURDAY_END), "SATURDAY_END"),
        late_threshold=_parse_hhmm(opt("LATE_THRESHOLD", c.LATE_THRESHOLD), "LATE_THRESHOLD"),
        late_penalty_flat=late_fee,
    )

    try:
        mode = LateDeductionMode(str(opt("LATE_DEDUCTION_MODE", LateDeductionMode.PROPORTIONAL.value)).upper())
    except ValueError:
        raise ValidationError("LATE_DEDUCTION_MODE must be PROPORTIONAL or FLAT")

    payroll = PayrollRules(
        working_days_per_month=int(opt("WORKING_DAYS_PER_MONTH", c.WORKING_DAYS_PER_MONTH)),
        monthly_work_hours=int(opt("MONTHLY_WORK_HOURS", c.MONTHLY_WORK_HOURS)),
        overtime_flat_multiplier=float(opt("OVERTIME_FLAT_MULTIPLIER", c.OVERTIME_FLAT_MULTIPLIER)),
        late_deduction_mode=mode,
        late_penalty_flat=late_fee,
    )
    if payroll.working_days_per_month <= 0 or payroll.monthly_work_hours <= 0:
        raise ValidationError("WORKING_DAYS_PER_MONTH and MONTHLY_WORK_HOURS must be positive")

    return RuleSet(
        work=work,
        overtime=OvertimeTierRules(weekday_end=work.weekday_end),
        payroll=payroll,
        timezone=str(opt("TIMEZONE", c.DEFAULT_TIMEZONE)),
    )
