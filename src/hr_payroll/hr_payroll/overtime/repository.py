from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import OvertimeRequest


class OvertimeRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        start_time: datetime,
        end_time: datetime,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def list_for_period(
        self,
        *,
        employee_id: int,
        start: date,
        end: date,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[OvertimeRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to `status`. False when it was no longer pending."""

        raise NotImplementedError
