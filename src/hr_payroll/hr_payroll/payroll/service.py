from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.logging import get_logger
from ..common.validators import require_period
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import DeductionType, PayrollStatus
from ..core.exceptions import DomainError, InvalidStateError, PayrollNotFoundError
from ..employees.repository import EmployeeRepository
from .aggregator import PayrollAggregator
from .model import BatchResult, PayrollRecord
from .repository import PayrollRepository

logger = get_logger(__name__)


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        aggregator: PayrollAggregator,
        *,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._aggregator = aggregator
        self._timezone = timezone

    def generate(self, employee_id: int, month: int, year: int) -> PayrollRecord:
        return self._aggregator.generate(employee_id, month, year)

    def generate_for_all(self, month: int, year: int) -> BatchResult:
        """One transaction per employee; a failure is recorded and the batch goes on."""
        month, year = require_period(month, year)

        generated: list[PayrollRecord] = []
        failed: dict[int, str] = {}
        for employee in self._employees.list_active():
            try:
                generated.append(self._aggregator.generate(employee.employee_id, month, year))
            except DomainError as exc:
                failed[employee.employee_id] = str(exc)
                logger.warning(
                    "payroll_generation_failed",
                    employee_id=employee.employee_id,
                    error=type(exc).__name__,
                    detail=str(exc),
                )

        logger.info("payroll_batch_finished", period=f"{year}-{month:02d}", generated=len(generated), failed=len(failed))
        return BatchResult(generated=generated, failed=failed)

    def get_payroll(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(payroll_id)
        if not record:
            raise PayrollNotFoundError(f"Payroll {payroll_id} not found")
        return record

    def list_for_employee(self, employee_id: int) -> list[PayrollRecord]:
        return list(self._payrolls.list_for_employee(employee_id))

    def mark_paid(self, payroll_id: int, *, now: Optional[datetime] = None) -> PayrollRecord:
        record = self.get_payroll(payroll_id)
        if record.status == PayrollStatus.PAID:
            raise InvalidStateError("Payroll is already paid")

        paid_at = now or now_local(self._timezone)
        if not self._payrolls.mark_paid(payroll_id=int(payroll_id), paid_at=paid_at):
            raise InvalidStateError("Payroll is already paid")

        logger.info("payroll_marked_paid", payroll_id=payroll_id, employee_id=record.employee_id)
        return self.get_payroll(payroll_id)

    def deduction_breakdown(self, employee_id: int, month: int, year: int) -> dict[DeductionType, float]:
        """Sum of every deduction row of the month by type, external ones included."""
        month, year = require_period(month, year)
        totals: dict[DeductionType, float] = defaultdict(float)
        for entry in self._payrolls.list_deductions(employee_id=employee_id, month=month, year=year):
            totals[entry.type] += float(entry.amount)
        return {t: round(v, 2) for t, v in totals.items()}
