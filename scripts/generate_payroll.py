"""Generate payroll for every active employee of one month.

Usage: python scripts/generate_payroll.py --month 5 --year 2025
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.hr_payroll.hr_payroll.main import create_container


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate monthly payroll for all active employees")
    parser.add_argument("--month", type=int, required=True)
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument(
        "--backfill-absent",
        action="store_true",
        help="create ABSENT records for past workdays without attendance before generating",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    container = create_container()

    if args.backfill_absent:
        from src.hr_payroll.hr_payroll.common.datetime_utils import month_bounds

        start, end = month_bounds(args.year, args.month)
        for employee in container.employees_repo.list_active():
            container.attendance_service.ensure_absent_records(employee.employee_id, start, end)

    result = container.payroll_service.generate_for_all(args.month, args.year)
    for record in result.generated:
        print(f"OK: employee={record.employee_id} payroll={record.payroll_id} net={record.net_salary:,.2f}")
    for employee_id, error in result.failed.items():
        print(f"FAILED: employee={employee_id} {error}")

    return 1 if result.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
