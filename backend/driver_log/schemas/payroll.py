# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from driver_log.schemas.driver import DriverResponse

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class CreatePayrollConfigRequest(BaseModel):
    """Request body for publishing a new payroll configuration version."""

    base_salary: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    overtime_rate_per_hour: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    fuel_allowance_per_day: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    effective_from: date


class PayrollConfigResponse(BaseModel):
    """The payroll configuration in force. ``version`` is None for built-in defaults."""

    version: int | None
    base_salary: Decimal
    overtime_rate_per_hour: Decimal
    fuel_allowance_per_day: Decimal
    annual_leave_allowance: int
    effective_from: date | None
    created_at: datetime | None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class _PayrollTotals(BaseModel):
    driver_id: uuid.UUID
    year: int
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


class PayrollResponse(_PayrollTotals):
    """Monthly payroll breakdown for one driver, rounded to cents."""

    month: int
    daily_salary: Decimal


class YearToDateResponse(_PayrollTotals):
    """Year-to-date payroll for one driver, rounded to cents."""

    months_included: int


class PayrollEntryResponse(BaseModel):
    """One driver's entry in a batch. Exactly one of ``payroll`` and ``error`` is set."""

    driver: DriverResponse
    payroll: PayrollResponse | YearToDateResponse | None = None
    error: str | None = None


class PayrollBatchResponse(BaseModel):
    """Payroll across all active drivers."""

    year: int
    month: int | None
    items: list[PayrollEntryResponse]
    total: int
    errors: int
