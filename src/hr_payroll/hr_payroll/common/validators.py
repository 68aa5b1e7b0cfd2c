from __future__ import annotations

from datetime import datetime

from ..core.exceptions import ValidationError


def require_period(month: int, year: int) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be integers")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if year <= 0:
        raise ValidationError(f"Invalid year: {year}")
    return month, year


def require_interval(start: datetime, end: datetime) -> None:
    if start is None or end is None:
        raise ValidationError("Start and end time are required")
    if end < start:
        raise ValidationError("End time cannot be earlier than start time")
