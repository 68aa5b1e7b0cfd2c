import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")

WORKING_DAYS_PER_MONTH = int(os.getenv("WORKING_DAYS_PER_MONTH", "22"))
MONTHLY_WORK_HOURS = int(os.getenv("MONTHLY_WORK_HOURS", "173"))
LATE_DEDUCTION_MODE = os.getenv("LATE_DEDUCTION_MODE", "PROPORTIONAL")
LATE_PENALTY_FLAT = float(os.getenv("LATE_PENALTY_FLAT", "30000"))
OVERTIME_FLAT_MULTIPLIER = float(os.getenv("OVERTIME_FLAT_MULTIPLIER", "1.5"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
