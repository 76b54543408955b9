"""Tests for the payroll engine: overtime split, leave accounting, money.

A Wednesday 06:00-14:30 shift is sometimes quoted with zero overtime and
gross pay 27033.30. That conflicts with the rule that minutes before 08:00
are overtime, so here it earns two hours of overtime (gross 27233.30, see
``test_wednesday_early_shift``). The zero-overtime figures are checked on an
08:00-16:30 shift in ``test_wednesday_daytime_shift``.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from driver_log.exceptions import InvalidPeriod
from driver_log.models.enums import LeaveStatus, LeaveType, ShiftStatus
from driver_log.models.leave import LeaveRequest
from driver_log.models.shift import Shift
from driver_log.services.lifecycle import elapsed_minutes
from driver_log.services.payroll import (
    PayrollConfig,
    PayrollEngine,
    PayrollResult,
    count_unpaid_leaves,
    split_shift_minutes,
)

DRIVER_ID = uuid.uuid4()

CONFIG = PayrollConfig(
    base_salary=Decimal("27000"),
    overtime_rate_per_hour=Decimal("100"),
    fuel_allowance_per_day=Decimal("33.30"),
)

# 2025-01-08 is a Wednesday, 2025-01-12 a Sunday.
WEDNESDAY = date(2025, 1, 8)
SUNDAY = date(2025, 1, 12)


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def _shift(start: datetime, end: datetime, distance: int = 100, status: ShiftStatus = ShiftStatus.COMPLETED) -> Shift:
    return Shift(
        driver_id=DRIVER_ID,
        clock_in_time=start,
        clock_out_time=end,
        start_odometer=0,
        end_odometer=distance,
        total_distance=distance,
        duration_minutes=elapsed_minutes(start, end),
        status=status.value,
    )


def _leave(
    day: date,
    leave_type: LeaveType = LeaveType.ANNUAL,
    status: LeaveStatus = LeaveStatus.APPROVED,
) -> LeaveRequest:
    return LeaveRequest(driver_id=DRIVER_ID, leave_date=day, leave_type=leave_type.value, status=status.value)


def _compute(shifts: list[Shift], leaves: list[LeaveRequest] | None = None, **kwargs: int) -> PayrollResult:
    return PayrollEngine(CONFIG).compute(DRIVER_ID, 2025, 1, shifts, leaves or [], **kwargs)


# ---------------------------------------------------------------------------
# Overtime split
# ---------------------------------------------------------------------------


def test_sunday_is_all_overtime() -> None:
    split = split_shift_minutes(_at(SUNDAY, 10), _at(SUNDAY, 12), 120)
    assert split.overtime == 120
    assert split.regular == 0


def test_weekday_within_daytime_window_has_no_overtime() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 8), _at(WEDNESDAY, 20), 720)
    assert split.overtime == 0
    assert split.regular == 720


def test_weekday_early_start_counts_minutes_before_eight() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 6), _at(WEDNESDAY, 14, 30), 510)
    assert split.overtime == 120
    assert split.regular == 390


def test_weekday_shift_ending_before_eight_is_capped_at_duration() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 5), _at(WEDNESDAY, 7), 120)
    assert split.overtime == 120
    assert split.regular == 0


def test_weekday_late_finish_counts_minutes_after_twenty() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 18), _at(WEDNESDAY, 22), 240)
    assert split.overtime == 120
    assert split.regular == 120


def test_weekday_shift_starting_after_twenty_is_all_overtime() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 21), _at(WEDNESDAY, 23), 120)
    assert split.overtime == 120
    assert split.regular == 0


def test_overnight_shift_counts_past_midnight_as_overtime() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 22), _at(WEDNESDAY + timedelta(days=1), 2), 240)
    assert split.overtime == 240
    assert split.regular == 0


def test_early_and_late_components_add_up() -> None:
    split = split_shift_minutes(_at(WEDNESDAY, 7), _at(WEDNESDAY, 21), 840)
    assert split.overtime == 120
    assert split.regular == 720


def test_sunday_rule_uses_clock_in_day() -> None:
    saturday = SUNDAY - timedelta(days=1)
    split = split_shift_minutes(_at(saturday, 22), _at(SUNDAY, 1), 180)
    assert split.overtime == 180


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------


def test_wednesday_daytime_shift() -> None:
    result = _compute([_shift(_at(WEDNESDAY, 8), _at(WEDNESDAY, 16, 30))]).rounded()

    assert result.regular_hours == Decimal("8.50")
    assert result.overtime_hours == Decimal("0.00")
    assert result.days_worked == 1
    assert result.fuel_allowance == Decimal("33.30")
    assert result.overtime_pay == Decimal("0.00")
    assert result.adjusted_base_salary == Decimal("27000.00")
    assert result.gross_pay == Decimal("27033.30")


def test_wednesday_early_shift() -> None:
    result = _compute([_shift(_at(WEDNESDAY, 6), _at(WEDNESDAY, 14, 30))]).rounded()

    assert result.regular_minutes == 390
    assert result.overtime_minutes == 120
    assert result.overtime_pay == Decimal("200.00")
    assert result.gross_pay == Decimal("27233.30")


def test_sunday_shift() -> None:
    result = _compute([_shift(_at(SUNDAY, 6), _at(SUNDAY, 14, 30))]).rounded()

    assert result.overtime_hours == Decimal("8.50")
    assert result.regular_hours == Decimal("0.00")
    assert result.overtime_pay == Decimal("850.00")
    assert result.gross_pay == Decimal("27883.30")


def test_thirteenth_annual_leave_is_unpaid() -> None:
    result = _compute([], [_leave(date(2025, 1, 20))], annual_leaves_before_month=12).rounded()

    assert result.unpaid_leaves_this_month == 1
    assert result.paid_leaves_this_month == 0
    assert result.unpaid_leave_deduction == Decimal("900.00")
    assert result.adjusted_base_salary == Decimal("26100.00")
    assert result.gross_pay == Decimal("26100.00")
    assert result.annual_leaves_used == 13
    assert result.annual_leaves_remaining == 0


# ---------------------------------------------------------------------------
# Leave accounting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("leave_count", "expected_unpaid"),
    [(11, 0), (12, 0), (13, 1)],
)
def test_annual_leave_allowance_boundary(leave_count: int, expected_unpaid: int) -> None:
    leaves = [_leave(date(2025, 1, day)) for day in range(1, leave_count + 1)]
    result = _compute([], leaves)

    assert result.total_leave_days == leave_count
    assert result.unpaid_leaves_this_month == expected_unpaid
    assert result.paid_leaves_this_month == leave_count - expected_unpaid
    assert result.unpaid_leave_deduction == expected_unpaid * Decimal(900)


@pytest.mark.parametrize(
    ("before_month", "in_month", "expected_unpaid"),
    [(10, 1, 0), (11, 1, 0), (11, 2, 1), (12, 1, 1), (20, 3, 3)],
)
def test_leave_ordinal_spans_the_year(before_month: int, in_month: int, expected_unpaid: int) -> None:
    leaves = [_leave(date(2025, 1, day)) for day in range(1, in_month + 1)]
    assert count_unpaid_leaves(leaves, before_month) == expected_unpaid


def test_non_annual_leave_is_always_paid() -> None:
    leaves = [_leave(date(2025, 1, 2), LeaveType.SICK), _leave(date(2025, 1, 3), LeaveType.PERSONAL)]
    result = _compute([], leaves, annual_leaves_before_month=12)

    assert result.total_leave_days == 2
    assert result.unpaid_leaves_this_month == 0
    assert result.paid_leaves_this_month == 2
    assert result.annual_leaves_used == 12


def test_unapproved_leaves_are_ignored() -> None:
    leaves = [
        _leave(date(2025, 1, 2), status=LeaveStatus.PENDING),
        _leave(date(2025, 1, 3), status=LeaveStatus.REJECTED),
    ]
    result = _compute([], leaves, annual_leaves_before_month=12)
    assert result.total_leave_days == 0
    assert result.unpaid_leave_deduction == 0


def test_annual_leave_count_is_reported_when_supplied() -> None:
    result = _compute([], [_leave(date(2025, 1, 2))], annual_leaves_before_month=0, annual_leave_count=5)
    assert result.annual_leaves_used == 5
    assert result.annual_leaves_remaining == 7


def test_leave_days_earn_no_fuel_allowance() -> None:
    result = _compute([_shift(_at(WEDNESDAY, 9), _at(WEDNESDAY, 17))], [_leave(date(2025, 1, 9))])
    assert result.days_worked == 1
    assert result.fuel_allowance == Decimal("33.30")


# ---------------------------------------------------------------------------
# Shift filtering and aggregation
# ---------------------------------------------------------------------------


def test_empty_month_pays_base_salary() -> None:
    result = _compute([]).rounded()
    assert result.shift_count == 0
    assert result.days_worked == 0
    assert result.total_distance == 0
    assert result.gross_pay == Decimal("27000.00")
    assert result.daily_salary == Decimal("900.00")


def test_active_and_out_of_month_shifts_are_ignored() -> None:
    active = _shift(_at(WEDNESDAY, 9), _at(WEDNESDAY, 17), status=ShiftStatus.ACTIVE)
    february = _shift(datetime(2025, 2, 3, 9), datetime(2025, 2, 3, 17))
    result = _compute([active, february])
    assert result.shift_count == 0
    assert result.gross_pay == Decimal("27000")


def test_multiple_shifts_on_one_day_count_one_worked_day() -> None:
    shifts = [
        _shift(_at(WEDNESDAY, 9), _at(WEDNESDAY, 12), distance=40),
        _shift(_at(WEDNESDAY, 13), _at(WEDNESDAY, 17), distance=60),
        _shift(_at(date(2025, 1, 9), 9), _at(date(2025, 1, 9), 17), distance=80),
    ]
    result = _compute(shifts)
    assert result.shift_count == 3
    assert result.days_worked == 2
    assert result.total_distance == 180
    assert result.fuel_allowance == Decimal("66.60")


def test_daily_salary_uses_thirty_day_divisor_every_month() -> None:
    engine = PayrollEngine(CONFIG)
    february = engine.compute(DRIVER_ID, 2025, 2, [], [])
    march = engine.compute(DRIVER_ID, 2025, 3, [], [])
    assert february.daily_salary == march.daily_salary == Decimal(900)


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_month_raises(month: int) -> None:
    with pytest.raises(InvalidPeriod):
        PayrollEngine(CONFIG).compute(DRIVER_ID, 2025, month, [], [])


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------


def test_gross_pay_identity_holds_after_rounding() -> None:
    config = PayrollConfig(
        base_salary=Decimal("25000"),
        overtime_rate_per_hour=Decimal("97.50"),
        fuel_allowance_per_day=Decimal("33.33"),
    )
    shifts = [
        _shift(_at(SUNDAY, 9), _at(SUNDAY, 9, 7)),
        _shift(_at(WEDNESDAY, 7, 49), _at(WEDNESDAY, 8, 30)),
        _shift(_at(date(2025, 1, 9), 20), _at(date(2025, 1, 9), 20, 13)),
    ]
    leaves = [_leave(date(2025, 1, 20))]
    result = PayrollEngine(config).compute(DRIVER_ID, 2025, 1, shifts, leaves, annual_leaves_before_month=12)
    rounded = result.rounded()

    assert rounded.gross_pay == rounded.adjusted_base_salary + rounded.overtime_pay + rounded.fuel_allowance
    assert abs(rounded.gross_pay - result.gross_pay) <= Decimal("0.02")
    assert rounded.overtime_pay == Decimal("50.38")
    assert rounded.adjusted_base_salary == Decimal("24166.67")
    assert rounded.gross_pay == Decimal("24317.04")


def test_rounding_is_half_up() -> None:
    config = PayrollConfig(
        base_salary=Decimal("100"),
        overtime_rate_per_hour=Decimal("0.30"),
        fuel_allowance_per_day=Decimal(0),
    )
    # 5 Sunday minutes at 0.30/h = 0.025
    result = PayrollEngine(config).compute(DRIVER_ID, 2025, 1, [_shift(_at(SUNDAY, 9), _at(SUNDAY, 9, 5))], [])
    assert result.rounded().overtime_pay == Decimal("0.03")
