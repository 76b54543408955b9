# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from driver_log.models.base import TimestampMixin, UUIDBase


class PayrollConfigVersion(UUIDBase, TimestampMixin, table=True):
    """A versioned set of payroll rates. Only the currently-active version is used."""

    __tablename__ = "payroll_config_version"
    __table_args__ = (sa.UniqueConstraint("version", name="uq_payroll_config_version"),)

    version: int
    base_salary: Decimal = Field(sa_type=sa.Numeric(12, 2))  # ty: ignore[invalid-argument-type]
    overtime_rate_per_hour: Decimal = Field(sa_type=sa.Numeric(12, 2))  # ty: ignore[invalid-argument-type]
    fuel_allowance_per_day: Decimal = Field(sa_type=sa.Numeric(12, 2))  # ty: ignore[invalid-argument-type]
    effective_from: date = Field(index=True)
