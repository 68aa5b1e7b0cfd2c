from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalState, AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_period(self, *, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: Optional[datetime],
        status: AttendanceStatus,
        late_minutes: int = 0,
        approval_state: ApprovalState = ApprovalState.UNSUBMITTED,
        note: Optional[str] = None,
    ) -> int:
        """Insert a new day. Raises DuplicateCheckInError when the day already exists."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        overtime_minutes: int,
        approval_state: ApprovalState,
    ) -> bool:
        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> bool:
        """Overwrite every mutable column of an existing day (approval, rejection, re-check-in)."""

        raise NotImplementedError
