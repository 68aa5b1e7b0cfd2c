from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApprovalState, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day of one employee.

    `overtime_minutes` is the raw, pre-multiplier figure.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: AttendanceStatus
    late_minutes: int = 0
    overtime_minutes: int = 0
    overtime_approved: bool = False
    sunday_work_approved: bool = False
    approval_state: ApprovalState = ApprovalState.UNSUBMITTED
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    """Read-model for the monthly attendance report."""

    employee_id: int
    year: int
    month: int
    days_on_time: int
    days_late: int
    days_absent: int
    days_on_leave: int
    total_late_minutes: int
    total_overtime_minutes: int

    @property
    def days_present(self) -> int:
        return self.days_on_time + self.days_late + self.days_on_leave
