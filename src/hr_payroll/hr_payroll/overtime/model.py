from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class OvertimeRequest:
    """Explicit overtime interval submitted by a SHIFT employee."""

    request_id: int
    employee_id: int
    work_date: date
    start_time: datetime
    end_time: datetime
    status: RequestStatus
    created_at: datetime
    reason: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None
