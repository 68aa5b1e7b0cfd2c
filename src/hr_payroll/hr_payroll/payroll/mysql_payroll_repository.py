from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Sequence

import mysql.connector

from ..core.enums import DeductionType, PayrollStatus
from ..core.exceptions import DuplicatePayrollError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, is_duplicate_key
from .model import Allowance, DeductionEntry, NewDeduction, PayrollComputation, PayrollRecord
from .repository import PayrollRepository, PayrollWriter

_PAYROLL_COLUMNS = """
    payroll_id, employee_id, month, year, base_salary, total_allowances, total_deductions,
    overtime_hours, overtime_amount, late_deduction, absence_deduction,
    days_present, days_absent, days_late, net_salary, status, created_at, paid_at
"""


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=float(r["base_salary"]),
        total_allowances=float(r["total_allowances"]),
        total_deductions=float(r["total_deductions"]),
        overtime_hours=float(r["overtime_hours"]),
        overtime_amount=float(r["overtime_amount"]),
        late_deduction=float(r["late_deduction"]),
        absence_deduction=float(r["absence_deduction"]),
        days_present=int(r["days_present"]),
        days_absent=int(r["days_absent"]),
        days_late=int(r["days_late"]),
        net_salary=float(r["net_salary"]),
        status=PayrollStatus(r["status"]),
        created_at=r.get("created_at"),
        paid_at=r.get("paid_at"),
    )


class _MySQLPayrollWriter(PayrollWriter):
    def __init__(self, cur):
        self._cur = cur

    def payroll_exists(self, *, employee_id: int, month: int, year: int) -> bool:
        self._cur.execute(
            """
            SELECT payroll_id FROM payrolls
            WHERE employee_id=%s AND month=%s AND year=%s
            FOR UPDATE
            """,
            (int(employee_id), int(month), int(year)),
        )
        return fetchone(self._cur) is not None

    def add_deduction(self, entry: NewDeduction) -> int:
        self._cur.execute(
            """
            INSERT INTO deductions(employee_id, month, year, reason, amount, type)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(entry.employee_id), int(entry.month), int(entry.year), entry.reason, entry.amount, entry.type.value),
        )
        return int(self._cur.lastrowid)

    def insert_payroll(self, *, employee_id: int, month: int, year: int, computation: PayrollComputation) -> int:
        c = computation
        try:
            self._cur.execute(
                """
                INSERT INTO payrolls(
                    employee_id, month, year, base_salary, total_allowances, total_deductions,
                    overtime_hours, overtime_amount, late_deduction, absence_deduction,
                    days_present, days_absent, days_late, net_salary, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(month),
                    int(year),
                    c.base_salary,
                    c.total_allowances,
                    c.total_deductions,
                    c.overtime_hours,
                    c.overtime_amount,
                    c.late_deduction,
                    c.absence_deduction,
                    c.days_present,
                    c.days_absent,
                    c.days_late,
                    c.net_salary,
                    PayrollStatus.PENDING.value,
                ),
            )
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                raise DuplicatePayrollError(f"Payroll for employee {employee_id} {year}-{month:02d} already exists")
            raise
        return int(self._cur.lastrowid)

    def link_deductions(self, *, deduction_ids: Sequence[int], payroll_id: int) -> None:
        if not deduction_ids:
            return
        placeholders = ",".join(["%s"] * len(deduction_ids))
        self._cur.execute(
            f"UPDATE deductions SET payroll_id=%s WHERE deduction_id IN ({placeholders})",
            (int(payroll_id), *[int(d) for d in deduction_ids]),
        )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[PayrollWriter]:
        with db_transaction(self._conn_factory) as (_, cur):
            yield _MySQLPayrollWriter(cur)

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYROLL_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PAYROLL_COLUMNS}
                FROM payrolls
                WHERE employee_id=%s
                ORDER BY year DESC, month DESC
                """,
                (int(employee_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def mark_paid(self, *, payroll_id: int, paid_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls SET status=%s, paid_at=%s
                WHERE payroll_id=%s AND status=%s
                """,
                (PayrollStatus.PAID.value, paid_at, int(payroll_id), PayrollStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_deductions(self, *, employee_id: int, month: int, year: int) -> Sequence[DeductionEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT deduction_id, employee_id, month, year, reason, amount, type, payroll_id, created_at
                FROM deductions
                WHERE employee_id=%s AND month=%s AND year=%s
                ORDER BY deduction_id ASC
                """,
                (int(employee_id), int(month), int(year)),
            )
            return [
                DeductionEntry(
                    deduction_id=int(r["deduction_id"]),
                    employee_id=int(r["employee_id"]),
                    month=int(r["month"]),
                    year=int(r["year"]),
                    reason=r["reason"],
                    amount=float(r["amount"]),
                    type=DeductionType(r["type"]),
                    payroll_id=r.get("payroll_id"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def list_allowances(self, *, employee_id: int, month: int, year: int) -> Sequence[Allowance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT allowance_id, employee_id, month, year, type, amount
                FROM allowances
                WHERE employee_id=%s AND month=%s AND year=%s
                """,
                (int(employee_id), int(month), int(year)),
            )
            return [
                Allowance(
                    allowance_id=int(r["allowance_id"]),
                    employee_id=int(r["employee_id"]),
                    month=int(r["month"]),
                    year=int(r["year"]),
                    type=r["type"],
                    amount=float(r["amount"]),
                )
                for r in fetchall(cur)
            ]
