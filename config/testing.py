import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "Asia/Jakarta"

WORKING_DAYS_PER_MONTH = 22
MONTHLY_WORK_HOURS = 173
LATE_DEDUCTION_MODE = "PROPORTIONAL"
LATE_PENALTY_FLAT = 30000.0
OVERTIME_FLAT_MULTIPLIER = 1.5

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
