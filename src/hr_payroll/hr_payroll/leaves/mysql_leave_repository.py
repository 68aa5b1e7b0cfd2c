from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveInterval
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_approved(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_id, employee_id, start_date, end_date
                FROM leaves
                WHERE employee_id=%s AND status='APPROVED'
                  AND start_date <= %s AND end_date >= %s
                ORDER BY start_date
                """,
                (int(employee_id), end, start),
            )
            return [
                LeaveInterval(
                    leave_id=int(r["leave_id"]),
                    employee_id=int(r["employee_id"]),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                )
                for r in fetchall(cur)
            ]
