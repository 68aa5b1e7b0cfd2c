"""Print the tiered overtime value of a range of check-out times.

Usage: python scripts/simulate_overtime.py --day-type SATURDAY --from 12:00 --to 20:00 --step 30
"""

from __future__ import annotations

import argparse
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.hr_payroll.hr_payroll.core.enums import DayType
from src.hr_payroll.hr_payroll.overtime.engine import OvertimeEngine

# A fixed reference date per day type; only the time of day matters.
_REFERENCE_DAYS = {
    DayType.WEEKDAY: date(2025, 1, 6),
    DayType.SATURDAY: date(2025, 1, 4),
    DayType.SUNDAY: date(2025, 1, 5),
}


def simulate(engine: OvertimeEngine, day_type: DayType, start: str, end: str, step_minutes: int) -> list[dict]:
    day = _REFERENCE_DAYS[day_type]
    current = datetime.combine(day, datetime.strptime(start, "%H:%M").time())
    last = datetime.combine(day, datetime.strptime(end, "%H:%M").time())

    rows = []
    while current <= last:
        result = engine.tiered(current, day_type)
        rows.append(
            {
                "checkout": current.strftime("%H:%M"),
                "normal": result.normal_hours,
                "overtime_raw": result.raw_overtime_hours,
                "overtime_payable": result.overtime_payable_hours,
                "total": result.total_payable_hours,
            }
        )
        current += timedelta(minutes=step_minutes)
    return rows


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Tiered overtime what-if table")
    parser.add_argument("--day-type", choices=[d.value for d in DayType], default=DayType.WEEKDAY.value)
    parser.add_argument("--from", dest="start", default="16:30")
    parser.add_argument("--to", dest="end", default="21:00")
    parser.add_argument("--step", type=int, default=30, help="minutes between rows")
    args = parser.parse_args(argv)

    if args.step <= 0:
        parser.error("--step must be positive")

    print(f"{'checkout':>8} {'normal':>7} {'ot_raw':>7} {'ot_pay':>7} {'total':>7}")
    for row in simulate(OvertimeEngine(), DayType(args.day_type), args.start, args.end, args.step):
        print(
            f"{row['checkout']:>8} {row['normal']:>7.2f} {row['overtime_raw']:>7.2f} "
            f"{row['overtime_payable']:>7.2f} {row['total']:>7.2f}"
        )


if __name__ == "__main__":
    main()
