class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee/record does not exist."""


class EmployeeNotFoundError(NotFoundError):
    pass


class AttendanceNotFoundError(NotFoundError):
    pass


class OvertimeRequestNotFoundError(NotFoundError):
    pass


class PayrollNotFoundError(NotFoundError):
    pass


class DuplicateActionError(DomainError):
    """Raised when an idempotency guard detects a repeated action."""


class DuplicateCheckInError(DuplicateActionError):
    pass


class DuplicateCheckOutError(DuplicateActionError):
    pass


class DuplicatePayrollError(DuplicateActionError):
    pass


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the current state."""


class NoCheckInFoundError(InvalidStateError):
    pass
