from datetime import date

import pytest

from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord
from src.hr_payroll.hr_payroll.core.enums import AttendanceStatus, DeductionType, LateDeductionMode, WorkScheduleType
from src.hr_payroll.hr_payroll.core.rules import PayrollRules
from src.hr_payroll.hr_payroll.employees.model import Employee
from src.hr_payroll.hr_payroll.payroll.calculator.standard_calculator import (
    FlatLatePenaltyCalculator,
    StandardPayrollCalculator,
    calculator_for,
)
from src.hr_payroll.hr_payroll.payroll.model import Allowance

BUDI = Employee(employee_id=1, full_name="Budi Santoso", basic_salary=3_500_000)
DAILY = 3_500_000 / 22


def record(day: int, status: AttendanceStatus, *, late: int = 0, overtime: int = 0) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=day,
        employee_id=1,
        work_date=date(2025, 1, day),
        check_in=None,
        check_out=None,
        status=status,
        late_minutes=late,
        overtime_minutes=overtime,
    )


def compute(records, allowances=(), *, employee=BUDI, calculator=None, **kwargs):
    calculator = calculator or StandardPayrollCalculator()
    return calculator.compute(employee, records, list(allowances), month=1, year=2025, **kwargs)


def test_fifteen_minutes_late_deducts_one_percent_per_minute():
    result = compute([record(6, AttendanceStatus.LATE, late=15)])

    assert result.late_deduction == pytest.approx(23863.64, abs=0.01)
    assert len(result.deductions) == 1
    assert result.deductions[0].type == DeductionType.LATE
    assert "2025-01-06" in result.deductions[0].reason


def test_late_deduction_is_capped_at_one_day():
    result = compute([record(6, AttendanceStatus.LATE, late=200)])

    assert result.late_deduction == pytest.approx(DAILY, abs=0.01)


def test_one_late_entry_per_late_day():
    result = compute([record(6, AttendanceStatus.LATE, late=10), record(7, AttendanceStatus.LATE, late=20)])

    assert [d.type for d in result.deductions] == [DeductionType.LATE, DeductionType.LATE]
    assert result.days_late == 2


def test_flat_mode_charges_the_flat_fee_instead():
    calculator = calculator_for(PayrollRules(late_deduction_mode=LateDeductionMode.FLAT))

    result = compute([record(6, AttendanceStatus.LATE, late=15)], calculator=calculator)

    assert isinstance(calculator, FlatLatePenaltyCalculator)
    assert result.late_deduction == 30000.0


def test_absences_become_one_aggregate_entry():
    result = compute([record(6, AttendanceStatus.ABSENT), record(7, AttendanceStatus.ABSENT)])

    absence = [d for d in result.deductions if d.type == DeductionType.ABSENCE]
    assert len(absence) == 1
    assert result.days_absent == 2
    assert result.absence_deduction == pytest.approx(2 * DAILY, abs=0.01)


def test_unapproved_sunday_is_not_an_absence():
    result = compute([record(5, AttendanceStatus.ABSENT)])

    assert result.days_absent == 0
    assert result.deductions == ()


def test_leave_counts_as_present():
    result = compute([record(6, AttendanceStatus.ON_LEAVE), record(7, AttendanceStatus.ON_TIME), record(8, AttendanceStatus.LATE, late=40)])

    assert result.days_present == 3


def test_non_shift_overtime_is_flat_one_and_a_half():
    result = compute([record(6, AttendanceStatus.ON_TIME, overtime=180)])

    assert result.overtime_hours == 3.0
    assert result.overtime_amount == pytest.approx(3 * (3_500_000 / 173) * 1.5, abs=0.01)


def test_explicit_hourly_rate_wins():
    employee = Employee(employee_id=1, full_name="Budi Santoso", basic_salary=3_500_000, hourly_rate=20_000)

    result = compute([record(6, AttendanceStatus.ON_TIME, overtime=60)], employee=employee)

    assert result.overtime_amount == 30000.0


def test_shift_overtime_uses_request_hours_at_hourly_rate():
    employee = Employee(
        employee_id=2,
        full_name="Sari Wulandari",
        basic_salary=4_200_000,
        hourly_rate=25_000,
        work_schedule_type=WorkScheduleType.SHIFT,
    )

    result = compute([record(6, AttendanceStatus.ON_TIME, overtime=600)], employee=employee, shift_overtime_hours=5.5)

    assert result.overtime_hours == 5.5
    assert result.overtime_amount == 137500.0


def test_net_salary_formula():
    allowances = [Allowance(allowance_id=1, employee_id=1, month=1, year=2025, type="TRANSPORT", amount=250_000)]

    result = compute(
        [
            record(6, AttendanceStatus.LATE, late=15),
            record(7, AttendanceStatus.ABSENT),
            record(8, AttendanceStatus.ON_TIME, overtime=180),
        ],
        allowances,
    )

    assert result.total_allowances == 250_000
    assert result.total_deductions == pytest.approx(result.late_deduction + result.absence_deduction, abs=0.01)
    assert result.net_salary == pytest.approx(
        3_500_000 - result.total_deductions + result.overtime_amount + 250_000, abs=0.01
    )
