from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from .model import Allowance, DeductionEntry, NewDeduction, PayrollComputation, PayrollRecord


class PayrollWriter(Protocol):
    """Writes of one payroll run; everything commits together or not at all."""

    def payroll_exists(self, *, employee_id: int, month: int, year: int) -> bool:
        """Existence check that also locks the key until the transaction ends."""

        raise NotImplementedError

    def add_deduction(self, entry: NewDeduction) -> int:
        raise NotImplementedError

    def insert_payroll(self, *, employee_id: int, month: int, year: int, computation: PayrollComputation) -> int:
        """Raises DuplicatePayrollError when the key already exists."""

        raise NotImplementedError

    def link_deductions(self, *, deduction_ids: Sequence[int], payroll_id: int) -> None:
        raise NotImplementedError


class PayrollRepository(Protocol):
    def transaction(self) -> ContextManager[PayrollWriter]:
        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def mark_paid(self, *, payroll_id: int, paid_at: datetime) -> bool:
        """PENDING -> PAID. False when the row was not PENDING."""

        raise NotImplementedError

    def list_deductions(self, *, employee_id: int, month: int, year: int) -> Sequence[DeductionEntry]:
        raise NotImplementedError

    def list_allowances(self, *, employee_id: int, month: int, year: int) -> Sequence[Allowance]:
        raise NotImplementedError
