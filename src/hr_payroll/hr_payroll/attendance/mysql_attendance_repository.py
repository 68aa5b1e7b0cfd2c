from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ApprovalState, AttendanceStatus
from ..core.exceptions import DuplicateCheckInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_out_time, status,
    late_minutes, overtime_minutes, overtime_approved, sunday_work_approved,
    approval_state, approved_by, approved_at, note
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=r.get("check_in_time"),
        check_out=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        late_minutes=int(r.get("late_minutes") or 0),
        overtime_minutes=int(r.get("overtime_minutes") or 0),
        overtime_approved=bool(r.get("overtime_approved")),
        sunday_work_approved=bool(r.get("sunday_work_approved")),
        approval_state=ApprovalState(r.get("approval_state") or ApprovalState.UNSUBMITTED.value),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_period(self, *, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, check_in_time, status, late_minutes, approval_state, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, check_in, status.value, int(late_minutes), approval_state.value, note),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicateCheckInError(f"Attendance for employee {employee_id} on {work_date} already exists")
            raise

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        overtime_minutes: int,
        approval_state: ApprovalState,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # check_out_time IS NULL keeps a concurrent second check-out from overwriting the first.
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, overtime_minutes=%s, approval_state=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out, int(overtime_minutes), approval_state.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def save(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, late_minutes=%s,
                    overtime_minutes=%s, overtime_approved=%s, sunday_work_approved=%s,
                    approval_state=%s, approved_by=%s, approved_at=%s, note=%s
                WHERE attendance_id=%s
                """,
                (
                    record.check_in,
                    record.check_out,
                    record.status.value,
                    int(record.late_minutes),
                    int(record.overtime_minutes),
                    int(record.overtime_approved),
                    int(record.sunday_work_approved),
                    record.approval_state.value,
                    record.approved_by,
                    record.approved_at,
                    record.note,
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0
