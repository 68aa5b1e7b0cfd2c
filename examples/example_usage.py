"""Example: drive the services directly, without any HTTP layer.

Checks an employee in and out, then prints the monthly summary and history.
"""

import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.hr_payroll.hr_payroll.main import create_container


def main():
    container = create_container()
    service = container.attendance_service

    service.check_in(1, now=datetime(2025, 1, 6, 8, 40))
    service.check_out(1, now=datetime(2025, 1, 6, 18, 0))

    print(service.monthly_summary(1, 2025, 1))
    print(service.get_history_rows(1, limit=5))


if __name__ == "__main__":
    main()
