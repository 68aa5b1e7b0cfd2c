from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import DeductionType, PayrollStatus


@dataclass(frozen=True)
class Allowance:
    """Pre-approved allowance row, written by the allowance workflow."""

    allowance_id: int
    employee_id: int
    month: int
    year: int
    type: str
    amount: float


@dataclass(frozen=True)
class NewDeduction:
    employee_id: int
    month: int
    year: int
    reason: str
    amount: float
    type: DeductionType


@dataclass(frozen=True)
class DeductionEntry:
    """Append-only audit row. Advances and soft loans arrive here from outside."""

    deduction_id: int
    employee_id: int
    month: int
    year: int
    reason: str
    amount: float
    type: DeductionType
    payroll_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollComputation:
    """Pure result of the monthly calculation, before anything is persisted."""

    base_salary: float
    total_allowances: float
    overtime_hours: float
    overtime_amount: float
    late_deduction: float
    absence_deduction: float
    days_present: int
    days_absent: int
    days_late: int
    deductions: tuple[NewDeduction, ...] = field(default_factory=tuple)

    @property
    def total_deductions(self) -> float:
        return round(self.late_deduction + self.absence_deduction, 2)

    @property
    def net_salary(self) -> float:
        return round(self.base_salary - self.total_deductions + self.overtime_amount + self.total_allowances, 2)


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    month: int
    year: int
    base_salary: float
    total_allowances: float
    total_deductions: float
    overtime_hours: float
    overtime_amount: float
    late_deduction: float
    absence_deduction: float
    days_present: int
    days_absent: int
    days_late: int
    net_salary: float
    status: PayrollStatus = PayrollStatus.PENDING
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class BatchResult:
    generated: list[PayrollRecord]
    failed: dict[int, str]
