from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord
from src.hr_payroll.hr_payroll.attendance.service import REJECTION_MARKER, AttendanceService
from src.hr_payroll.hr_payroll.common.locks import KeyedLock
from src.hr_payroll.hr_payroll.core.enums import ApprovalState, AttendanceStatus, WorkScheduleType
from src.hr_payroll.hr_payroll.core.exceptions import (
    AttendanceNotFoundError,
    DuplicateCheckInError,
    DuplicateCheckOutError,
    EmployeeNotFoundError,
    InvalidStateError,
    NoCheckInFoundError,
    ValidationError,
)
from src.hr_payroll.hr_payroll.employees.model import Employee
from src.hr_payroll.hr_payroll.leaves.model import LeaveInterval


@dataclass
class InMemoryEmployees:
    employees_by_id: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees_by_id.get(employee_id)

    def list_active(self):
        return [e for e in self.employees_by_id.values() if e.is_active]


@dataclass
class InMemoryLeaves:
    leaves: list[LeaveInterval]

    def list_approved(self, *, employee_id: int, start: date, end: date):
        return [
            lv
            for lv in self.leaves
            if lv.employee_id == employee_id and lv.start_date <= end and lv.end_date >= start
        ]


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._by_id.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def get_recent_for_employee(self, employee_id: int, limit: int):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_for_period(self, *, employee_id: int, start: date, end: date):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id and start <= r.work_date <= end]
        return sorted(items, key=lambda r: r.work_date)

    def create_record(self, *, employee_id, work_date, check_in, status, late_minutes=0, approval_state=ApprovalState.UNSUBMITTED, note=None) -> int:
        if self.get_for_employee_and_date(employee_id, work_date):
            raise DuplicateCheckInError("duplicate")
        self._id += 1
        self._by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            status=status,
            late_minutes=late_minutes,
            approval_state=approval_state,
            note=note,
        )
        return self._id

    def update_checkout(self, *, attendance_id, check_out, overtime_minutes, approval_state) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec or rec.check_out is not None:
            return False
        self._by_id[attendance_id] = replace(
            rec, check_out=check_out, overtime_minutes=overtime_minutes, approval_state=approval_state
        )
        return True

    def save(self, record: AttendanceRecord) -> bool:
        if record.attendance_id not in self._by_id:
            return False
        self._by_id[record.attendance_id] = record
        return True


def make_service(leaves: list[LeaveInterval] | None = None):
    employees = InMemoryEmployees(
        {
            1: Employee(employee_id=1, full_name="Budi Santoso", basic_salary=3_500_000),
            2: Employee(
                employee_id=2,
                full_name="Sari Wulandari",
                basic_salary=4_200_000,
                work_schedule_type=WorkScheduleType.SHIFT,
            ),
        }
    )
    attendance = InMemoryAttendance()
    service = AttendanceService(attendance, employees, InMemoryLeaves(leaves or []))
    return service, attendance


def test_check_in_on_time():
    service, _ = make_service()

    rec = service.check_in(1, now=datetime(2025, 1, 6, 7, 55))

    assert rec.status == AttendanceStatus.ON_TIME
    assert rec.late_minutes == 0
    assert rec.approval_state == ApprovalState.UNSUBMITTED


def test_check_in_late_records_minutes_from_start():
    service, attendance = make_service()

    rec = service.check_in(1, now=datetime(2025, 1, 6, 8, 45))

    stored = attendance.get_by_id(rec.attendance_id)
    assert stored.status == AttendanceStatus.LATE
    assert stored.late_minutes == 45


def test_second_check_in_same_day_is_rejected():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    with pytest.raises(DuplicateCheckInError):
        service.check_in(1, now=datetime(2025, 1, 6, 9, 0))


def test_check_in_unknown_employee():
    service, _ = make_service()

    with pytest.raises(EmployeeNotFoundError):
        service.check_in(99, now=datetime(2025, 1, 6, 8, 0))


def test_check_in_on_approved_leave_is_on_leave():
    leave = LeaveInterval(leave_id=1, employee_id=1, start_date=date(2025, 1, 6), end_date=date(2025, 1, 8))
    service, _ = make_service([leave])

    rec = service.check_in(1, now=datetime(2025, 1, 7, 10, 0))

    assert rec.status == AttendanceStatus.ON_LEAVE
    assert rec.late_minutes == 0


def test_check_out_without_check_in():
    service, _ = make_service()

    with pytest.raises(NoCheckInFoundError):
        service.check_out(1, now=datetime(2025, 1, 6, 16, 30))


def test_double_check_out_is_rejected():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))
    service.check_out(1, now=datetime(2025, 1, 6, 16, 0))

    with pytest.raises(DuplicateCheckOutError):
        service.check_out(1, now=datetime(2025, 1, 6, 16, 5))


def test_check_out_before_check_in_is_invalid():
    service, attendance = make_service()
    rec = service.check_in(1, now=datetime(2025, 1, 6, 8, 0))
    attendance.save(replace(attendance.get_by_id(rec.attendance_id), check_in=datetime(2025, 1, 6, 12, 0)))

    with pytest.raises(ValidationError):
        service.check_out(1, now=datetime(2025, 1, 6, 11, 0))


def test_check_out_within_hours_needs_no_approval():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    rec = service.check_out(1, now=datetime(2025, 1, 6, 16, 30))

    assert rec.approval_state == ApprovalState.UNSUBMITTED
    assert rec.overtime_minutes == 0


def test_overtime_waits_for_approval_then_counts():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))
    pending = service.check_out(1, now=datetime(2025, 1, 6, 18, 30))

    assert pending.approval_state == ApprovalState.PENDING_APPROVAL
    assert pending.overtime_minutes == 0

    approved = service.approve_overtime(pending.attendance_id, admin_id=7, now=datetime(2025, 1, 7, 9, 0))

    assert approved.approval_state == ApprovalState.APPROVED
    assert approved.overtime_approved
    assert approved.overtime_minutes == 120
    assert approved.approved_by == 7
    assert approved.approved_at == datetime(2025, 1, 7, 9, 0)


def test_approve_without_pending_request():
    service, _ = make_service()
    rec = service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    with pytest.raises(InvalidStateError):
        service.approve_overtime(rec.attendance_id, admin_id=7)


def test_approve_unknown_record():
    service, _ = make_service()

    with pytest.raises(AttendanceNotFoundError):
        service.approve_overtime(404, admin_id=7)


def test_rejection_clears_check_out_and_allows_same_day_check_in():
    service, attendance = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 40))
    pending = service.check_out(1, now=datetime(2025, 1, 6, 19, 0))
    service.approve_overtime(pending.attendance_id, admin_id=7)

    rejected = service.reject_overtime(pending.attendance_id, admin_id=7, reason="not requested")

    assert rejected.approval_state == ApprovalState.REJECTED
    assert rejected.check_out is None
    assert rejected.overtime_minutes == 0
    assert not rejected.overtime_approved
    assert rejected.status == AttendanceStatus.LATE
    assert REJECTION_MARKER in rejected.note
    assert "not requested" in rejected.note

    again = service.check_in(1, now=datetime(2025, 1, 6, 20, 0))

    assert again.attendance_id == pending.attendance_id
    assert again.approval_state == ApprovalState.UNSUBMITTED
    assert again.check_out is None
    assert len(attendance.list_for_period(employee_id=1, start=date(2025, 1, 6), end=date(2025, 1, 6))) == 1


def test_reject_requires_pending_or_approved():
    service, _ = make_service()
    rec = service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    with pytest.raises(InvalidStateError):
        service.reject_overtime(rec.attendance_id, admin_id=7)


def test_sunday_work_is_absent_until_approved():
    service, _ = make_service()

    rec = service.check_in(1, now=datetime(2025, 1, 5, 9, 0))
    assert rec.status == AttendanceStatus.ABSENT
    assert rec.approval_state == ApprovalState.PENDING_APPROVAL

    service.check_out(1, now=datetime(2025, 1, 5, 12, 0))
    approved = service.approve_overtime(rec.attendance_id, admin_id=7)

    assert approved.status == AttendanceStatus.ON_TIME
    assert approved.sunday_work_approved
    assert approved.overtime_minutes == 720


def test_rejected_sunday_goes_back_to_absent():
    service, _ = make_service()
    rec = service.check_in(1, now=datetime(2025, 1, 5, 9, 0))
    service.check_out(1, now=datetime(2025, 1, 5, 12, 0))
    service.approve_overtime(rec.attendance_id, admin_id=7)

    rejected = service.reject_overtime(rec.attendance_id, admin_id=7)

    assert rejected.status == AttendanceStatus.ABSENT
    assert not rejected.sunday_work_approved


def test_overnight_check_out_closes_previous_day():
    service, _ = make_service()
    rec = service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    out = service.check_out(1, now=datetime(2025, 1, 7, 2, 0))

    assert out.attendance_id == rec.attendance_id
    assert out.approval_state == ApprovalState.PENDING_APPROVAL
    assert service.approve_overtime(rec.attendance_id, admin_id=7).overtime_minutes == 570


def test_backfill_creates_absent_workdays_only_once():
    leave = LeaveInterval(leave_id=1, employee_id=1, start_date=date(2025, 1, 8), end_date=date(2025, 1, 8))
    service, attendance = make_service([leave])
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))

    created = service.ensure_absent_records(1, date(2025, 1, 4), date(2025, 1, 12), today=date(2025, 1, 10))

    # Sat 4, Tue 7, Wed 8 (leave), Thu 9; Sun 5 skipped, Mon 6 exists, Fri 10 is today.
    assert created == 4
    by_day = {r.work_date: r.status for r in attendance.list_for_period(employee_id=1, start=date(2025, 1, 1), end=date(2025, 1, 31))}
    assert by_day[date(2025, 1, 7)] == AttendanceStatus.ABSENT
    assert by_day[date(2025, 1, 8)] == AttendanceStatus.ON_LEAVE
    assert date(2025, 1, 5) not in by_day

    assert service.ensure_absent_records(1, date(2025, 1, 4), date(2025, 1, 12), today=date(2025, 1, 10)) == 0


def test_monthly_summary_counts_statuses():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 8, 0))
    service.check_in(1, now=datetime(2025, 1, 7, 8, 50))
    service.ensure_absent_records(1, date(2025, 1, 8), date(2025, 1, 8), today=date(2025, 1, 9))

    summary = service.monthly_summary(1, 2025, 1)

    assert summary.days_on_time == 1
    assert summary.days_late == 1
    assert summary.days_absent == 1
    assert summary.days_present == 2
    assert summary.total_late_minutes == 50


def test_monthly_summary_rejects_bad_month():
    service, _ = make_service()

    with pytest.raises(ValidationError):
        service.monthly_summary(1, 2025, 13)


def test_history_rows_show_flat_late_fee():
    service, _ = make_service()
    service.check_in(1, now=datetime(2025, 1, 6, 9, 0))
    service.check_in(1, now=datetime(2025, 1, 7, 8, 0))

    rows = service.get_history_rows(1, limit=5)

    assert [r["date"] for r in rows] == ["2025-01-07", "2025-01-06"]
    assert rows[0]["late_penalty"] == 0.0
    assert rows[1]["late_penalty"] == 30000.0
    assert rows[1]["check_out"] == "-"


def test_rejecting_overtime_on_a_leave_day_keeps_on_leave():
    leave = LeaveInterval(leave_id=1, employee_id=1, start_date=date(2025, 1, 6), end_date=date(2025, 1, 6))
    service, _ = make_service([leave])
    rec = service.check_in(1, now=datetime(2025, 1, 6, 9, 30))
    pending = service.check_out(1, now=datetime(2025, 1, 6, 18, 0))
    assert pending.approval_state == ApprovalState.PENDING_APPROVAL

    rejected = service.reject_overtime(rec.attendance_id, admin_id=7)

    assert rejected.status == AttendanceStatus.ON_LEAVE
    assert rejected.late_minutes == 0


def test_approving_sunday_work_on_a_leave_day_keeps_on_leave():
    leave = LeaveInterval(leave_id=1, employee_id=1, start_date=date(2025, 1, 5), end_date=date(2025, 1, 5))
    service, _ = make_service([leave])
    rec = service.check_in(1, now=datetime(2025, 1, 5, 9, 0))
    service.check_out(1, now=datetime(2025, 1, 5, 12, 0))

    approved = service.approve_overtime(rec.attendance_id, admin_id=7)
    assert approved.status == AttendanceStatus.ON_LEAVE

    rejected = service.reject_overtime(rec.attendance_id, admin_id=7)
    assert rejected.status == AttendanceStatus.ON_LEAVE


class SlowAttendance(InMemoryAttendance):
    """Widens the gap between the existence check and the insert."""

    def __init__(self):
        super().__init__()
        self.creates = 0

    def get_for_employee_and_date(self, employee_id, work_date):
        found = super().get_for_employee_and_date(employee_id, work_date)
        time.sleep(0.05)
        return found

    def create_record(self, **kwargs) -> int:
        self.creates += 1
        return super().create_record(**kwargs)


def test_concurrent_check_ins_for_the_same_day_are_serialized():
    employees = InMemoryEmployees({1: Employee(employee_id=1, full_name="Budi Santoso", basic_salary=3_500_000)})
    attendance = SlowAttendance()
    locks = KeyedLock()
    services = [AttendanceService(attendance, employees, locks=locks) for _ in range(4)]
    barrier = threading.Barrier(len(services))
    results, errors = [], []

    def worker(service):
        barrier.wait()
        try:
            results.append(service.check_in(1, now=datetime(2025, 1, 6, 8, 0)))
        except DuplicateCheckInError as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(s,)) for s in services]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1
    assert len(errors) == 3
    assert attendance.creates == 1
    assert len(attendance.list_for_period(employee_id=1, start=date(2025, 1, 6), end=date(2025, 1, 6))) == 1
    assert locks.active_keys() == 0
