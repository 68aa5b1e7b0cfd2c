from datetime import date, datetime

import pytest

from src.hr_payroll.hr_payroll.core.enums import DayType
from src.hr_payroll.hr_payroll.core.exceptions import ValidationError
from src.hr_payroll.hr_payroll.overtime.engine import OvertimeEngine

MONDAY = date(2025, 1, 6)
SATURDAY = date(2025, 1, 4)
SUNDAY = date(2025, 1, 5)


@pytest.mark.parametrize(
    "hour, minute, payable, total",
    [
        (16, 30, 0.0, 7.5),
        (17, 30, 1.5, 9.0),
        (18, 30, 3.5, 11.0),
        (17, 0, 0.75, 8.25),
    ],
)
def test_weekday_tiers(hour, minute, payable, total):
    result = OvertimeEngine().tiered(datetime(2025, 1, 6, hour, minute), DayType.WEEKDAY)

    assert result.normal_hours == 7.5
    assert result.overtime_payable_hours == pytest.approx(payable)
    assert result.total_payable_hours == pytest.approx(total)


def test_weekday_raw_overtime_is_the_real_duration():
    result = OvertimeEngine().tiered(datetime(2025, 1, 6, 17, 30), DayType.WEEKDAY)

    assert result.raw_overtime_hours == pytest.approx(1.0)
    assert len(result.breakdown) == 2


def test_saturday_full_block_without_overtime():
    result = OvertimeEngine().tiered(datetime(2025, 1, 4, 14, 0), DayType.SATURDAY)

    assert result.total_payable_hours == pytest.approx(10.0)
    assert result.overtime_payable_hours == 0.0


def test_saturday_overtime_after_break_pays_single():
    result = OvertimeEngine().tiered(datetime(2025, 1, 4, 16, 30), DayType.SATURDAY)

    assert result.raw_overtime_hours == pytest.approx(2.5)
    assert result.overtime_payable_hours == pytest.approx(2.5)
    assert result.total_payable_hours == pytest.approx(12.5)


def test_short_saturday_pays_double_in_full():
    result = OvertimeEngine().tiered(datetime(2025, 1, 4, 11, 0), DayType.SATURDAY)

    assert result.normal_hours == pytest.approx(3.0)
    assert result.total_payable_hours == pytest.approx(6.0)


def test_sunday_is_all_double_minus_break():
    result = OvertimeEngine().tiered(datetime(2025, 1, 5, 16, 30), DayType.SUNDAY)

    assert result.normal_hours == 0.0
    assert result.overtime_payable_hours == pytest.approx(15.0)
    assert result.total_payable_hours == pytest.approx(15.0)


def test_day_type_defaults_to_the_checkout_date():
    engine = OvertimeEngine()

    assert engine.tiered(datetime(2025, 1, 5, 16, 30)).total_payable_hours == pytest.approx(15.0)


def test_raw_minutes_need_approval():
    engine = OvertimeEngine()
    checkout = datetime(2025, 1, 6, 18, 30)

    assert engine.raw_minutes(checkout, MONDAY, overtime_approved=False) == 0
    assert engine.raw_minutes(checkout, MONDAY, overtime_approved=True) == 120


def test_raw_minutes_before_work_end_is_zero():
    assert OvertimeEngine().raw_minutes(datetime(2025, 1, 6, 15, 0), MONDAY, overtime_approved=True) == 0


def test_raw_minutes_capped_at_seven_next_morning():
    engine = OvertimeEngine()

    capped = engine.raw_minutes(datetime(2025, 1, 7, 9, 0), MONDAY, overtime_approved=True)
    at_cutoff = engine.raw_minutes(datetime(2025, 1, 7, 7, 0), MONDAY, overtime_approved=True)

    assert capped == at_cutoff == (24 - 16.5 + 7) * 60


def test_sunday_raw_minutes_use_the_sunday_flag_and_count_from_midnight():
    engine = OvertimeEngine()
    checkout = datetime(2025, 1, 5, 12, 0)

    assert engine.raw_minutes(checkout, SUNDAY, overtime_approved=True, sunday_approved=False) == 0
    assert engine.raw_minutes(checkout, SUNDAY, sunday_approved=True) == 720


def test_saturday_raw_minutes_count_from_attendance_end():
    assert OvertimeEngine().raw_minutes(datetime(2025, 1, 4, 13, 15), SATURDAY, overtime_approved=True) == 75


def test_interval_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        OvertimeEngine().interval_minutes(datetime(2025, 1, 6, 20, 0), datetime(2025, 1, 6, 18, 0), MONDAY)


def test_interval_minutes_capped_next_morning():
    minutes = OvertimeEngine().interval_minutes(datetime(2025, 1, 6, 22, 0), datetime(2025, 1, 7, 8, 0), MONDAY)

    assert minutes == 9 * 60


def test_weekday_interval_is_floored_to_half_hours():
    payable = OvertimeEngine().interval_payable(datetime(2025, 1, 6, 17, 0), datetime(2025, 1, 6, 19, 20), MONDAY)

    # 2h20m -> 2h: 1 x 1.5 + 1 x 2.0
    assert payable == pytest.approx(3.5)


def test_short_interval_pays_nothing():
    payable = OvertimeEngine().interval_payable(datetime(2025, 1, 6, 17, 0), datetime(2025, 1, 6, 17, 25), MONDAY)

    assert payable == 0.0


def test_saturday_interval_uses_break_above_four_hours():
    engine = OvertimeEngine()

    assert engine.interval_payable(datetime(2025, 1, 4, 8, 0), datetime(2025, 1, 4, 12, 0), SATURDAY) == pytest.approx(8.0)
    # 8h - 1h break = 7h: 5 x 2.0 + 2 x 1.0
    assert engine.interval_payable(datetime(2025, 1, 4, 8, 0), datetime(2025, 1, 4, 16, 0), SATURDAY) == pytest.approx(12.0)


def test_sunday_interval_is_double():
    engine = OvertimeEngine()

    assert engine.interval_payable(datetime(2025, 1, 5, 9, 0), datetime(2025, 1, 5, 12, 0), SUNDAY) == pytest.approx(6.0)
    assert engine.interval_payable(datetime(2025, 1, 5, 9, 0), datetime(2025, 1, 5, 15, 0), SUNDAY) == pytest.approx(10.0)
