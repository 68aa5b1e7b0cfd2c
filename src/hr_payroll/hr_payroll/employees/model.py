from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import WorkScheduleType


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee as seen by the payroll core.

    Note: Pure data object, populated by the HR module outside this package.
    """

    employee_id: int
    full_name: str
    basic_salary: float
    work_schedule_type: WorkScheduleType = WorkScheduleType.NON_SHIFT
    hourly_rate: float = 0.0
    is_active: bool = True

    def effective_hourly_rate(self, monthly_work_hours: int) -> float:
        """Explicit hourly rate if set, else basic salary spread over the monthly hours."""
        if self.hourly_rate and self.hourly_rate > 0:
            return float(self.hourly_rate)
        return float(self.basic_salary or 0) / monthly_work_hours

    def daily_rate(self, working_days: int) -> float:
        return float(self.basic_salary or 0) / working_days
