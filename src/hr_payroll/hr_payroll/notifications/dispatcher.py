from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..common.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PayslipGenerated:
    payroll_id: int
    employee_id: int
    month: int
    year: int
    net_salary: float


class NotificationDispatcher(Protocol):
    def publish(self, event: PayslipGenerated) -> None:
        raise NotImplementedError


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Default dispatcher: records the event, delivery is someone else's job."""

    def publish(self, event: PayslipGenerated) -> None:
        logger.info(
            "payslip_generated",
            payroll_id=event.payroll_id,
            employee_id=event.employee_id,
            period=f"{event.year}-{event.month:02d}",
            net_salary=event.net_salary,
        )
