from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...core.enums import AttendanceStatus, DayType, DeductionType, WorkScheduleType
from ...core.rules import PayrollRules
from ...employees.model import Employee
from ...work_calendar.classifier import day_type_of
from ..model import Allowance, NewDeduction, PayrollComputation

PRESENT_STATUSES = frozenset({AttendanceStatus.ON_TIME, AttendanceStatus.LATE, AttendanceStatus.ON_LEAVE})


def _money(value: float) -> float:
    return round(float(value), 2)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Subclasses decide the late penalty of one LATE day; everything else is
    shared so exactly one late rule applies per run.
    """

    def __init__(self, rules: PayrollRules | None = None):
        self._rules = rules or PayrollRules()

    @property
    def rules(self) -> PayrollRules:
        return self._rules

    @abstractmethod
    def late_deduction(self, *, daily_rate: float, late_minutes: int) -> float:
        raise NotImplementedError

    def compute(
        self,
        employee: Employee,
        records: Sequence[AttendanceRecord],
        allowances: Sequence[Allowance],
        *,
        month: int,
        year: int,
        shift_overtime_hours: float = 0.0,
    ) -> PayrollComputation:
        """Monthly figures for one employee.

        NON_SHIFT overtime comes from the raw minutes on the attendance records
        at the flat multiplier. SHIFT overtime is passed in as payable
        hour-equivalents of approved requests and paid at the hourly rate.
        """
        r = self._rules
        base = float(employee.basic_salary or 0)
        daily_rate = employee.daily_rate(r.working_days_per_month)
        hourly_rate = employee.effective_hourly_rate(r.monthly_work_hours)

        days_present = sum(1 for rec in records if rec.status in PRESENT_STATUSES)
        late_records = sorted((rec for rec in records if rec.status == AttendanceStatus.LATE), key=lambda x: x.work_date)
        # An unapproved Sunday stays ABSENT on the record but is not a missed workday.
        days_absent = sum(
            1 for rec in records if rec.status == AttendanceStatus.ABSENT and day_type_of(rec.work_date) != DayType.SUNDAY
        )

        deductions: list[NewDeduction] = []
        late_total = 0.0
        for rec in late_records:
            amount = _money(self.late_deduction(daily_rate=daily_rate, late_minutes=rec.late_minutes))
            late_total += amount
            deductions.append(
                NewDeduction(
                    employee_id=employee.employee_id,
                    month=month,
                    year=year,
                    reason=f"Late {rec.late_minutes} min on {rec.work_date.isoformat()}",
                    amount=amount,
                    type=DeductionType.LATE,
                )
            )

        absence_total = _money(days_absent * daily_rate * r.absence_percent / 100)
        if days_absent > 0:
            deductions.append(
                NewDeduction(
                    employee_id=employee.employee_id,
                    month=month,
                    year=year,
                    reason=f"Absent {days_absent} day(s) in {year}-{month:02d}",
                    amount=absence_total,
                    type=DeductionType.ABSENCE,
                )
            )

        if employee.work_schedule_type == WorkScheduleType.SHIFT:
            overtime_hours = float(shift_overtime_hours)
            overtime_amount = overtime_hours * hourly_rate
        else:
            overtime_hours = sum(rec.overtime_minutes for rec in records) / 60
            overtime_amount = overtime_hours * hourly_rate * r.overtime_flat_multiplier

        return PayrollComputation(
            base_salary=_money(base),
            total_allowances=_money(sum(float(a.amount) for a in allowances)),
            overtime_hours=round(overtime_hours, 2),
            overtime_amount=_money(overtime_amount),
            late_deduction=_money(late_total),
            absence_deduction=absence_total,
            days_present=days_present,
            days_absent=days_absent,
            days_late=len(late_records),
            deductions=tuple(deductions),
        )
