from __future__ import annotations

from enum import Enum


class DayType(str, Enum):
    """Calendar day classification used by the work rules."""

    WEEKDAY = "WEEKDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    ABSENT = "ABSENT"
    ON_LEAVE = "ON_LEAVE"


class ApprovalState(str, Enum):
    """Overtime / Sunday-work approval lifecycle of one attendance day."""

    UNSUBMITTED = "UNSUBMITTED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class WorkScheduleType(str, Enum):
    SHIFT = "SHIFT"
    NON_SHIFT = "NON_SHIFT"


class RequestStatus(str, Enum):
    """Approval workflow status of an overtime request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DeductionType(str, Enum):
    LATE = "LATE"
    ABSENCE = "ABSENCE"
    ADVANCE = "ADVANCE"
    SOFTLOAN = "SOFTLOAN"
    OTHER = "OTHER"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class LateDeductionMode(str, Enum):
    """Which late-penalty rule a payroll run applies (exactly one)."""

    PROPORTIONAL = "PROPORTIONAL"
    FLAT = "FLAT"
