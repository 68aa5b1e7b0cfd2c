from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..common.logging import get_logger
from ..common.validators import require_interval, require_period
from ..core.enums import DayType, RequestStatus, WorkScheduleType
from ..core.exceptions import (
    EmployeeNotFoundError,
    InvalidStateError,
    OvertimeRequestNotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .engine import OvertimeEngine
from .model import OvertimeRequest
from .repository import OvertimeRequestRepository
from .tiers.base import TieredOvertime

logger = get_logger(__name__)


@dataclass(frozen=True)
class NewOvertimeRequest:
    work_date: date
    start_time: datetime
    end_time: datetime
    reason: Optional[str] = None


class OvertimeRequestService:
    def __init__(
        self,
        requests: OvertimeRequestRepository,
        employees: EmployeeRepository,
        engine: OvertimeEngine | None = None,
    ):
        self._requests = requests
        self._employees = employees
        self._engine = engine or OvertimeEngine()

    def submit(self, employee_id: int, data: NewOvertimeRequest) -> int:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFoundError(f"Employee {employee_id} not found")
        if employee.work_schedule_type != WorkScheduleType.SHIFT:
            raise ValidationError("Overtime requests are only for shift employees")

        require_interval(data.start_time, data.end_time)
        if data.start_time.date() != data.work_date:
            raise ValidationError("Overtime must start on the requested work date")
        if self._engine.interval_minutes(data.start_time, data.end_time, data.work_date) <= 0:
            raise ValidationError("Overtime interval is empty")

        reason = (data.reason or "").strip() or None
        request_id = self._requests.create(
            employee_id=int(employee_id),
            work_date=data.work_date,
            start_time=data.start_time,
            end_time=data.end_time,
            reason=reason,
        )
        logger.info("overtime_request_submitted", request_id=request_id, employee_id=employee_id)
        return request_id

    def _require_pending(self, request_id: int) -> OvertimeRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise OvertimeRequestNotFoundError(f"Overtime request {request_id} not found")
        if req.status != RequestStatus.PENDING:
            raise InvalidStateError("Overtime request was already decided")
        return req

    def _decide(self, request_id: int, status: RequestStatus, admin_id: int, admin_note: str) -> None:
        self._require_pending(request_id)
        ok = self._requests.decide(
            request_id=int(request_id),
            status=status,
            decided_by=int(admin_id),
            admin_note=(admin_note or "").strip() or None,
        )
        if not ok:
            raise InvalidStateError("Overtime request was already decided")
        logger.info("overtime_request_decided", request_id=request_id, status=status.value, admin_id=admin_id)

    def approve(self, request_id: int, admin_id: int, admin_note: str = "") -> None:
        self._decide(request_id, RequestStatus.APPROVED, admin_id, admin_note)

    def reject(self, request_id: int, admin_id: int, admin_note: str = "") -> None:
        self._decide(request_id, RequestStatus.REJECTED, admin_id, admin_note)

    def list_for_month(
        self,
        employee_id: int,
        month: int,
        year: int,
        *,
        status: Optional[RequestStatus] = None,
    ) -> list[OvertimeRequest]:
        month, year = require_period(month, year)
        start, end = month_bounds(year, month)
        return list(self._requests.list_for_period(employee_id=int(employee_id), start=start, end=end, status=status))

    def payable_hours(self, req: OvertimeRequest) -> float:
        return self._engine.interval_payable(req.start_time, req.end_time, req.work_date)

    def preview_checkout(self, checkout: datetime, day_type: DayType | None = None) -> TieredOvertime:
        """What a day ending at `checkout` would be worth under the tier table."""
        return self._engine.tiered(checkout, day_type)
