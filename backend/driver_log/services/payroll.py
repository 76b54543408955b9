# ruff: noqa: TC003
"""Payroll engine: turns a month of shifts and approved leave into gross pay.

Pure computation, no I/O. Callers fetch shifts and leaves from the stores
(see ``driver_log.services.aggregator``) and pass them in.

Overtime rules, all against local wall-clock time:

* Sunday: the whole shift is overtime.
* Other days: minutes before 08:00 and minutes at or after 20:00 on the
  clock-in day are overtime; the rest is regular time.

Salary rules:

* ``daily_salary = base_salary / 30`` for every month, whatever its length.
* 12 approved annual leave-days per calendar year are paid. Annual leaves are
  numbered chronologically across the year; each one numbered above the
  allowance costs one ``daily_salary`` in the month it falls in.
* Fuel allowance is paid per distinct worked day; leave days earn none.

Money is carried as full-precision ``Decimal`` and only quantized to cents by
``rounded()``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from driver_log.exceptions import InvalidPeriod
from driver_log.models.enums import LeaveStatus, LeaveType, ShiftStatus
from driver_log.models.leave import LeaveRequest
from driver_log.models.shift import Shift

SUNDAY = 6
MORNING_OVERTIME_END = time(8, 0)
EVENING_OVERTIME_START = time(20, 0)
SALARY_DIVISOR_DAYS = Decimal(30)
DEFAULT_ANNUAL_LEAVE_ALLOWANCE = 12

_MINUTES_PER_HOUR = Decimal(60)
_CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def validate_period(year: int, month: int) -> None:
    """Raise InvalidPeriod unless ``year``/``month`` name a real calendar month."""
    if not 1 <= month <= 12:
        raise InvalidPeriod(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidPeriod(f"Year out of range: {year}")


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollConfig:
    """Rates used for one payroll computation."""

    base_salary: Decimal
    overtime_rate_per_hour: Decimal
    fuel_allowance_per_day: Decimal
    annual_leave_allowance: int = DEFAULT_ANNUAL_LEAVE_ALLOWANCE


@dataclass(frozen=True)
class ShiftMinutes:
    """Regular/overtime split of a single shift."""

    regular: int
    overtime: int


@dataclass(frozen=True)
class PayrollResult:
    """Payroll breakdown for one driver and one month."""

    driver_id: uuid.UUID
    year: int
    month: int
    shift_count: int
    days_worked: int
    total_distance: int
    regular_minutes: int
    overtime_minutes: int
    regular_hours: Decimal
    overtime_hours: Decimal
    base_salary: Decimal
    daily_salary: Decimal
    unpaid_leave_deduction: Decimal
    adjusted_base_salary: Decimal
    overtime_pay: Decimal
    fuel_allowance: Decimal
    gross_pay: Decimal
    total_leave_days: int
    paid_leaves_this_month: int
    unpaid_leaves_this_month: int
    annual_leaves_used: int
    annual_leave_allowance: int
    annual_leaves_remaining: int

    def rounded(self) -> PayrollResult:
        """Quantize hours and money to cents for output.

        Gross pay is re-derived from the rounded components so the
        ``gross = adjusted base + overtime pay + fuel allowance`` identity
        holds to the cent.
        """
        return replace(self, **_rounded_decimals(self), daily_salary=quantize_money(self.daily_salary))


@dataclass(frozen=True)
class YearToDateResult:
    """Field-by-field sum of a driver's monthly results for one year."""

    driver_id: uuid.UUID
    year: int
    months_included: int
    shift_count: int
    days_worked: int
    total_distance: int
    regular_minutes: int
    overtime_minutes: int
    regular_hours: Decimal
    overtime_hours: Decimal
    base_salary: Decimal
    unpaid_leave_deduction: Decimal
    adjusted_base_salary: Decimal
    overtime_pay: Decimal
    fuel_allowance: Decimal
    gross_pay: Decimal
    total_leave_days: int
    paid_leaves_this_month: int
    unpaid_leaves_this_month: int
    annual_leaves_used: int
    annual_leave_allowance: int
    annual_leaves_remaining: int

    @classmethod
    def from_months(
        cls,
        driver_id: uuid.UUID,
        year: int,
        months: Sequence[PayrollResult],
        *,
        annual_leaves_used: int,
        annual_leave_allowance: int = DEFAULT_ANNUAL_LEAVE_ALLOWANCE,
    ) -> YearToDateResult:
        """Sum full-precision monthly results.

        The annual leave counters are not summed; the caller passes the
        year's count fetched once.
        """
        totals: dict[str, int | Decimal] = {}
        for name in _SUMMED_FIELDS:
            zero: int | Decimal = Decimal(0) if name in _DECIMAL_FIELDS else 0
            totals[name] = sum((getattr(m, name) for m in months), zero)
        return cls(
            driver_id=driver_id,
            year=year,
            months_included=len(months),
            annual_leaves_used=annual_leaves_used,
            annual_leave_allowance=annual_leave_allowance,
            annual_leaves_remaining=max(0, annual_leave_allowance - annual_leaves_used),
            **totals,  # type: ignore[arg-type]
        )

    def rounded(self) -> YearToDateResult:
        """Quantize hours and money to cents for output."""
        return replace(self, **_rounded_decimals(self))


_DECIMAL_FIELDS = (
    "regular_hours",
    "overtime_hours",
    "base_salary",
    "unpaid_leave_deduction",
    "adjusted_base_salary",
    "overtime_pay",
    "fuel_allowance",
    "gross_pay",
)

_SUMMED_FIELDS = tuple(
    f.name
    for f in fields(YearToDateResult)
    if f.name
    not in {
        "driver_id",
        "year",
        "months_included",
        "annual_leaves_used",
        "annual_leave_allowance",
        "annual_leaves_remaining",
    }
)


def _rounded_decimals(result: PayrollResult | YearToDateResult) -> dict[str, Decimal]:
    values = {name: quantize_money(getattr(result, name)) for name in _DECIMAL_FIELDS}
    values["gross_pay"] = values["adjusted_base_salary"] + values["overtime_pay"] + values["fuel_allowance"]
    return values


# ---------------------------------------------------------------------------
# Pure computation helpers
# ---------------------------------------------------------------------------


def _minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``; zero if ``end`` is not later."""
    return max(0, int((end - start).total_seconds()) // 60)


def split_shift_minutes(clock_in_time: datetime, clock_out_time: datetime, duration_minutes: int) -> ShiftMinutes:
    """Split one shift into regular and overtime minutes.

    The late component counts from 20:00 on the clock-in day, or from
    clock-in if that is later, so overtime never exceeds the shift duration.
    """
    if clock_in_time.weekday() == SUNDAY:
        return ShiftMinutes(regular=0, overtime=duration_minutes)

    day = clock_in_time.date()
    morning_end = datetime.combine(day, MORNING_OVERTIME_END)
    evening_start = datetime.combine(day, EVENING_OVERTIME_START)

    early = min(_minutes_between(clock_in_time, morning_end), duration_minutes)
    late = _minutes_between(max(evening_start, clock_in_time), clock_out_time)
    overtime = min(early + late, duration_minutes)
    return ShiftMinutes(regular=max(0, duration_minutes - overtime), overtime=overtime)


def count_unpaid_leaves(
    leaves: Iterable[LeaveRequest],
    annual_leaves_before_month: int,
    allowance: int = DEFAULT_ANNUAL_LEAVE_ALLOWANCE,
) -> int:
    """Count this month's annual leaves whose ordinal in the year exceeds the allowance.

    Ordinals follow leave date order. Non-annual leave never consumes the
    allowance.
    """
    annual = sorted((lv for lv in leaves if lv.leave_type == LeaveType.ANNUAL), key=lambda lv: lv.leave_date)
    unpaid = 0
    for position, _leave in enumerate(annual, start=1):
        if annual_leaves_before_month + position > allowance:
            unpaid += 1
    return unpaid


def _in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class PayrollEngine:
    """Stateless monthly payroll calculator bound to one rate configuration."""

    def __init__(self, config: PayrollConfig) -> None:
        self.config = config

    def compute(
        self,
        driver_id: uuid.UUID,
        year: int,
        month: int,
        shifts: Iterable[Shift],
        leaves: Iterable[LeaveRequest],
        *,
        annual_leaves_before_month: int = 0,
        annual_leave_count: int | None = None,
    ) -> PayrollResult:
        """Compute the driver's payroll for ``year``/``month``.

        Only completed shifts clocked in during the month and approved leaves
        dated in the month are counted; anything else passed in is ignored.
        ``annual_leaves_before_month`` is the number of approved annual
        leaves earlier in the same year. ``annual_leave_count`` is the year's
        total, reported in the leave counters; it defaults to the annual
        leaves seen so far.
        """
        validate_period(year, month)
        config = self.config

        shift_count = 0
        total_distance = 0
        regular_minutes = 0
        overtime_minutes = 0
        worked_days: set[date] = set()

        for shift in shifts:
            if shift.status != ShiftStatus.COMPLETED or shift.clock_out_time is None:
                continue
            if not _in_month(shift.clock_in_time.date(), year, month):
                continue
            duration = shift.duration_minutes or 0
            split = split_shift_minutes(shift.clock_in_time, shift.clock_out_time, duration)
            shift_count += 1
            regular_minutes += split.regular
            overtime_minutes += split.overtime
            total_distance += shift.total_distance or 0
            worked_days.add(shift.clock_in_time.date())

        month_leaves = [
            lv for lv in leaves if lv.status == LeaveStatus.APPROVED and _in_month(lv.leave_date, year, month)
        ]
        total_leave_days = len(month_leaves)
        unpaid_leaves = count_unpaid_leaves(month_leaves, annual_leaves_before_month, config.annual_leave_allowance)
        if annual_leave_count is None:
            annual_leave_count = annual_leaves_before_month + sum(
                1 for lv in month_leaves if lv.leave_type == LeaveType.ANNUAL
            )

        overtime_hours = Decimal(overtime_minutes) / _MINUTES_PER_HOUR
        regular_hours = Decimal(regular_minutes) / _MINUTES_PER_HOUR
        overtime_pay = overtime_hours * config.overtime_rate_per_hour
        days_worked = len(worked_days)
        fuel_allowance = days_worked * config.fuel_allowance_per_day
        daily_salary = config.base_salary / SALARY_DIVISOR_DAYS
        unpaid_leave_deduction = unpaid_leaves * daily_salary
        adjusted_base_salary = config.base_salary - unpaid_leave_deduction

        return PayrollResult(
            driver_id=driver_id,
            year=year,
            month=month,
            shift_count=shift_count,
            days_worked=days_worked,
            total_distance=total_distance,
            regular_minutes=regular_minutes,
            overtime_minutes=overtime_minutes,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            base_salary=config.base_salary,
            daily_salary=daily_salary,
            unpaid_leave_deduction=unpaid_leave_deduction,
            adjusted_base_salary=adjusted_base_salary,
            overtime_pay=overtime_pay,
            fuel_allowance=fuel_allowance,
            gross_pay=adjusted_base_salary + overtime_pay + fuel_allowance,
            total_leave_days=total_leave_days,
            paid_leaves_this_month=total_leave_days - unpaid_leaves,
            unpaid_leaves_this_month=unpaid_leaves,
            annual_leaves_used=annual_leave_count,
            annual_leave_allowance=config.annual_leave_allowance,
            annual_leaves_remaining=max(0, config.annual_leave_allowance - annual_leave_count),
        )
