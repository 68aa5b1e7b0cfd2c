from __future__ import annotations

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..common.locks import KeyedLock
from ..common.logging import get_logger
from ..common.validators import require_period
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import PayrollStatus, RequestStatus, WorkScheduleType
from ..core.exceptions import DuplicatePayrollError, EmployeeNotFoundError
from ..core.rules import PayrollRules
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher, PayslipGenerated
from ..overtime.engine import OvertimeEngine
from ..overtime.repository import OvertimeRequestRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import calculator_for
from .model import PayrollRecord
from .repository import PayrollRepository

logger = get_logger(__name__)


class PayrollAggregator:
    """Monthly payroll generation for one employee.

    The duplicate check, every deduction row and the payroll row share one
    transaction. The payslip event goes out only after it commits.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        overtime_requests: OvertimeRequestRepository | None = None,
        *,
        rules: PayrollRules | None = None,
        calculator: PayrollCalculator | None = None,
        overtime_engine: OvertimeEngine | None = None,
        notifier: NotificationDispatcher | None = None,
        locks: KeyedLock | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._overtime_requests = overtime_requests
        self._calculator = calculator or calculator_for(rules or PayrollRules())
        self._engine = overtime_engine or OvertimeEngine()
        self._notifier = notifier or LoggingNotificationDispatcher()
        self._locks = locks or KeyedLock()
        self._timezone = timezone

    def _shift_overtime_hours(self, employee: Employee, month: int, year: int) -> float:
        if employee.work_schedule_type != WorkScheduleType.SHIFT or self._overtime_requests is None:
            return 0.0
        start, end = month_bounds(year, month)
        approved = self._overtime_requests.list_for_period(
            employee_id=employee.employee_id, start=start, end=end, status=RequestStatus.APPROVED
        )
        return sum(self._engine.interval_payable(r.start_time, r.end_time, r.work_date) for r in approved)

    def generate(self, employee_id: int, month: int, year: int) -> PayrollRecord:
        month, year = require_period(month, year)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")

        with self._locks.hold(("payroll", int(employee_id), month, year)):
            start, end = month_bounds(year, month)
            records = self._attendance.list_for_period(employee_id=employee_id, start=start, end=end)
            allowances = self._payrolls.list_allowances(employee_id=employee_id, month=month, year=year)
            computation = self._calculator.compute(
                employee,
                records,
                allowances,
                month=month,
                year=year,
                shift_overtime_hours=self._shift_overtime_hours(employee, month, year),
            )

            with self._payrolls.transaction() as tx:
                if tx.payroll_exists(employee_id=employee_id, month=month, year=year):
                    raise DuplicatePayrollError(f"Payroll for employee {employee_id} {year}-{month:02d} already exists")

                deduction_ids = [tx.add_deduction(entry) for entry in computation.deductions]
                payroll_id = tx.insert_payroll(employee_id=employee_id, month=month, year=year, computation=computation)
                tx.link_deductions(deduction_ids=deduction_ids, payroll_id=payroll_id)

        record = PayrollRecord(
            payroll_id=payroll_id,
            employee_id=int(employee_id),
            month=month,
            year=year,
            base_salary=computation.base_salary,
            total_allowances=computation.total_allowances,
            total_deductions=computation.total_deductions,
            overtime_hours=computation.overtime_hours,
            overtime_amount=computation.overtime_amount,
            late_deduction=computation.late_deduction,
            absence_deduction=computation.absence_deduction,
            days_present=computation.days_present,
            days_absent=computation.days_absent,
            days_late=computation.days_late,
            net_salary=computation.net_salary,
            status=PayrollStatus.PENDING,
            created_at=now_local(self._timezone),
        )
        logger.info(
            "payroll_generated",
            payroll_id=payroll_id,
            employee_id=employee_id,
            period=f"{year}-{month:02d}",
            net_salary=record.net_salary,
            deductions=len(deduction_ids),
        )
        self._publish(record)
        return record

    def _publish(self, record: PayrollRecord) -> None:
        event = PayslipGenerated(
            payroll_id=record.payroll_id,
            employee_id=record.employee_id,
            month=record.month,
            year=record.year,
            net_salary=record.net_salary,
        )
        try:
            self._notifier.publish(event)
        except Exception:
            # The payroll is committed; a lost notification must not undo it.
            logger.exception("payslip_notification_failed", payroll_id=record.payroll_id)
