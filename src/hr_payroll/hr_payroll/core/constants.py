"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_TIMEZONE = "Asia/Jakarta"
DEFAULT_HISTORY_LIMIT = 30

WEEKDAY_START = time(8, 0)
WEEKDAY_END = time(16, 30)
SATURDAY_START = time(8, 0)
SATURDAY_END = time(12, 0)
LATE_THRESHOLD = time(8, 30)
OVERTIME_CUTOFF_NEXT_DAY = time(7, 0)

LATE_PENALTY_FLAT = 30000.0

# Overtime tier table (payable hour-equivalents)
WEEKDAY_NORMAL_HOURS = 7.5
WEEKDAY_FIRST_HOUR_MULTIPLIER = 1.5
WEEKDAY_NEXT_HOURS_MULTIPLIER = 2.0
SATURDAY_OVERTIME_BASELINE_END = time(14, 0)
SATURDAY_NORMAL_HOURS = 5.0
WEEKEND_SHORT_DAY_HOURS = 4.0
WEEKEND_BREAK_HOURS = 1.0
WEEKEND_MULTIPLIER = 2.0
SATURDAY_OVERTIME_MULTIPLIER = 1.0
ESTIMATOR_DAY_START = time(8, 0)

WORKING_DAYS_PER_MONTH = 22
MONTHLY_WORK_HOURS = 173
LATE_DEDUCTION_PERCENT_PER_MINUTE = 1.0
ABSENCE_DEDUCTION_PERCENT = 100.0
OVERTIME_FLAT_MULTIPLIER = 1.5
