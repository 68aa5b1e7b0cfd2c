from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta

from ..common.datetime_utils import at, iter_days, month_bounds, now_local
from ..common.locks import KeyedLock
from ..common.logging import get_logger
from ..common.validators import require_period
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_TIMEZONE
from ..core.enums import ApprovalState, AttendanceStatus, DayType
from ..core.exceptions import (
    AttendanceNotFoundError,
    DuplicateCheckInError,
    DuplicateCheckOutError,
    EmployeeNotFoundError,
    NoCheckInFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository, has_approved_leave
from ..overtime.engine import OvertimeEngine
from ..work_calendar.classifier import WorkCalendarClassifier
from .model import AttendanceRecord, MonthlyAttendanceSummary
from .repository import AttendanceRepository
from .resolver import AttendanceStatusResolver
from .state import transition

logger = get_logger(__name__)

REJECTION_MARKER = "[REJECTED]"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leaves: LeaveRepository | None = None,
        *,
        classifier: WorkCalendarClassifier | None = None,
        resolver: AttendanceStatusResolver | None = None,
        overtime_engine: OvertimeEngine | None = None,
        locks: KeyedLock | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves
        self._classifier = classifier or WorkCalendarClassifier()
        self._resolver = resolver or AttendanceStatusResolver(self._classifier)
        self._engine = overtime_engine or OvertimeEngine(self._classifier)
        self._locks = locks or KeyedLock()
        self._timezone = timezone

    def _now(self, now: datetime | None) -> datetime:
        return now or now_local(self._timezone)

    def _require_employee(self, employee_id: int):
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")
        return employee

    def _require_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise AttendanceNotFoundError(f"Attendance {attendance_id} not found")
        return record

    def _on_leave(self, record: AttendanceRecord) -> bool:
        return has_approved_leave(self._leaves, employee_id=record.employee_id, day=record.work_date)

    def check_in(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        today = now.date()

        with self._locks.hold((int(employee_id), today)):
            self._require_employee(employee_id)

            existing = self._attendance.get_for_employee_and_date(employee_id, today)
            if existing and existing.approval_state != ApprovalState.REJECTED:
                raise DuplicateCheckInError("Already checked in today")

            on_leave = has_approved_leave(self._leaves, employee_id=employee_id, day=today)
            decision = self._resolver.resolve(now, today, sunday_approved=False, on_leave=on_leave)

            is_sunday = self._classifier.classify(today).day_type == DayType.SUNDAY
            state = ApprovalState.PENDING_APPROVAL if is_sunday and not on_leave else ApprovalState.UNSUBMITTED

            if existing:
                # Re-check-in after a rejection starts the day over.
                record = replace(
                    existing,
                    check_in=now,
                    check_out=None,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    overtime_minutes=0,
                    overtime_approved=False,
                    sunday_work_approved=False,
                    approval_state=transition(existing.approval_state, state),
                    approved_by=None,
                    approved_at=None,
                    note=decision.note,
                )
                self._attendance.save(record)
            else:
                attendance_id = self._attendance.create_record(
                    employee_id=employee_id,
                    work_date=today,
                    check_in=now,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    approval_state=state,
                    note=decision.note,
                )
                record = AttendanceRecord(
                    attendance_id=attendance_id,
                    employee_id=employee_id,
                    work_date=today,
                    check_in=now,
                    check_out=None,
                    status=decision.status,
                    late_minutes=decision.late_minutes,
                    approval_state=state,
                    note=decision.note,
                )

        logger.info(
            "attendance_checked_in",
            employee_id=employee_id,
            work_date=today.isoformat(),
            status=record.status.value,
            late_minutes=record.late_minutes,
            approval_state=record.approval_state.value,
        )
        return record

    def _open_record(self, employee_id: int, now: datetime) -> AttendanceRecord | None:
        today = now.date()
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record is not None:
            return record

        # Overnight overtime: before the next-day cutoff, close yesterday's open day.
        if now.time() <= self._classifier.rules.overtime_cutoff:
            previous = self._attendance.get_for_employee_and_date(employee_id, today - timedelta(days=1))
            if previous and previous.check_in and previous.check_out is None:
                return previous
        return None

    def check_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)

        record = self._open_record(employee_id, now)
        if record is None or record.check_in is None:
            raise NoCheckInFoundError("Must check in before checking out")

        with self._locks.hold((int(employee_id), record.work_date)):
            record = self._attendance.get_by_id(record.attendance_id) or record
            if record.check_out is not None:
                raise DuplicateCheckOutError("Already checked out today")
            if now < record.check_in:
                raise ValidationError("Check-out cannot be earlier than check-in")

            window = self._classifier.classify(record.work_date)
            minutes = self._engine.raw_minutes(
                now,
                record.work_date,
                overtime_approved=record.overtime_approved,
                sunday_approved=record.sunday_work_approved,
            )

            state = record.approval_state
            after_hours = not window.is_workday or now > at(record.work_date, window.end_time)
            if state == ApprovalState.UNSUBMITTED and after_hours:
                state = transition(state, ApprovalState.PENDING_APPROVAL)

            if not self._attendance.update_checkout(
                attendance_id=record.attendance_id,
                check_out=now,
                overtime_minutes=minutes,
                approval_state=state,
            ):
                raise DuplicateCheckOutError("Already checked out today")

        record = replace(record, check_out=now, overtime_minutes=minutes, approval_state=state)
        logger.info(
            "attendance_checked_out",
            employee_id=employee_id,
            work_date=record.work_date.isoformat(),
            overtime_minutes=minutes,
            approval_state=state.value,
        )
        return record

    def approve_overtime(self, attendance_id: int, admin_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        record = self._require_record(attendance_id)

        with self._locks.hold((record.employee_id, record.work_date)):
            state = transition(record.approval_state, ApprovalState.APPROVED)
            is_sunday = self._classifier.classify(record.work_date).day_type == DayType.SUNDAY

            sunday_approved = record.sunday_work_approved or is_sunday
            minutes = self._engine.raw_minutes(
                record.check_out,
                record.work_date,
                overtime_approved=True,
                sunday_approved=sunday_approved,
            )
            status = record.status
            if is_sunday and record.check_in is not None:
                status = self._resolver.resolve(
                    record.check_in,
                    record.work_date,
                    sunday_approved=True,
                    on_leave=self._on_leave(record),
                ).status

            updated = replace(
                record,
                status=status,
                overtime_minutes=minutes,
                overtime_approved=True,
                sunday_work_approved=sunday_approved,
                approval_state=state,
                approved_by=int(admin_id),
                approved_at=now,
            )
            self._attendance.save(updated)

        logger.info(
            "overtime_approved",
            attendance_id=attendance_id,
            employee_id=record.employee_id,
            admin_id=admin_id,
            overtime_minutes=minutes,
        )
        return updated

    def reject_overtime(
        self,
        attendance_id: int,
        admin_id: int,
        reason: str | None = None,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = self._now(now)
        record = self._require_record(attendance_id)

        with self._locks.hold((record.employee_id, record.work_date)):
            state = transition(record.approval_state, ApprovalState.REJECTED)

            on_leave = self._on_leave(record)
            if self._classifier.classify(record.work_date).day_type == DayType.SUNDAY and not on_leave:
                decision_status, late_minutes = AttendanceStatus.ABSENT, 0
            else:
                decision = self._resolver.resolve(record.check_in, record.work_date, on_leave=on_leave)
                decision_status, late_minutes = decision.status, decision.late_minutes

            marker = f"{REJECTION_MARKER} {reason.strip()}" if reason and reason.strip() else REJECTION_MARKER
            note = f"{record.note} {marker}" if record.note else marker

            updated = replace(
                record,
                check_out=None,
                status=decision_status,
                late_minutes=late_minutes,
                overtime_minutes=0,
                overtime_approved=False,
                sunday_work_approved=False,
                approval_state=state,
                approved_by=int(admin_id),
                approved_at=now,
                note=note,
            )
            self._attendance.save(updated)

        logger.info(
            "overtime_rejected",
            attendance_id=attendance_id,
            employee_id=record.employee_id,
            admin_id=admin_id,
            reason=reason,
        )
        return updated

    def ensure_absent_records(self, employee_id: int, start: date, end: date, *, today: date | None = None) -> int:
        """Backfill ABSENT (or ON_LEAVE) days with no record. Returns how many were created."""
        today = today or self._now(None).date()
        if end < start:
            raise ValidationError("End date cannot be earlier than start date")

        self._require_employee(employee_id)
        existing = {r.work_date for r in self._attendance.list_for_period(employee_id=employee_id, start=start, end=end)}

        created = 0
        for day in iter_days(start, min(end, today - timedelta(days=1))):
            if day in existing or not self._classifier.classify(day).is_workday:
                continue

            on_leave = has_approved_leave(self._leaves, employee_id=employee_id, day=day)
            decision = self._resolver.resolve(None, day, on_leave=on_leave)
            try:
                self._attendance.create_record(
                    employee_id=employee_id,
                    work_date=day,
                    check_in=None,
                    status=decision.status,
                    note=decision.note,
                )
            except DuplicateCheckInError:
                # Someone checked in for that day in the meantime.
                continue
            created += 1

        if created:
            logger.info("absent_records_backfilled", employee_id=employee_id, created=created)
        return created

    def monthly_summary(self, employee_id: int, year: int, month: int) -> MonthlyAttendanceSummary:
        month, year = require_period(month, year)
        start, end = month_bounds(year, month)
        records = self._attendance.list_for_period(employee_id=employee_id, start=start, end=end)

        def count(status: AttendanceStatus) -> int:
            return sum(1 for r in records if r.status == status)

        return MonthlyAttendanceSummary(
            employee_id=employee_id,
            year=year,
            month=month,
            days_on_time=count(AttendanceStatus.ON_TIME),
            days_late=count(AttendanceStatus.LATE),
            days_absent=count(AttendanceStatus.ABSENT),
            days_on_leave=count(AttendanceStatus.ON_LEAVE),
            total_late_minutes=sum(r.late_minutes for r in records if r.status == AttendanceStatus.LATE),
            total_overtime_minutes=sum(r.overtime_minutes for r in records),
        )

    def get_history_rows(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_employee(employee_id, limit)
        return [self._to_row(r) for r in rows]

    def _to_row(self, r: AttendanceRecord) -> dict:
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in.strftime("%H:%M:%S") if r.check_in else "-",
            "check_out": r.check_out.strftime("%H:%M:%S") if r.check_out else "-",
            "status": r.status.value,
            "late_minutes": r.late_minutes,
            "late_penalty": self._resolver.late_penalty(r.status),
            "overtime_minutes": r.overtime_minutes,
            "approval_state": r.approval_state.value,
        }
