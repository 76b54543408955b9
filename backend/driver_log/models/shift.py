# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field

from driver_log.models.base import TimestampMixin, UUIDBase
from driver_log.models.enums import ShiftStatus


def _now_utc() -> datetime:
    return datetime.now(UTC)


class Shift(UUIDBase, TimestampMixin, table=True):
    """One clock-in to clock-out work session with odometer bounds.

    ``clock_in_time`` and ``clock_out_time`` are naive local wall-clock
    timestamps in the operating timezone. They are never converted to UTC.
    """

    __tablename__ = "shift"
    __table_args__ = (
        sa.Index("ix_shift_driver_clock_in", "driver_id", "clock_in_time"),
        sa.Index(
            "uq_shift_one_active_per_driver",
            "driver_id",
            unique=True,
            postgresql_where=sa.text("status = 'active'"),
            sqlite_where=sa.text("status = 'active'"),
        ),
        sa.CheckConstraint("start_odometer >= 0", name="ck_shift_start_odometer"),
        sa.CheckConstraint("end_odometer IS NULL OR end_odometer >= start_odometer", name="ck_shift_end_odometer"),
    )

    driver_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("driver.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    clock_in_time: datetime = Field(sa_type=sa.DateTime(timezone=False))  # ty: ignore[invalid-argument-type]
    clock_out_time: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=False))  # ty: ignore[invalid-argument-type]
    start_odometer: int
    end_odometer: int | None = None
    total_distance: int | None = None
    duration_minutes: int | None = None
    status: str = Field(default=ShiftStatus.ACTIVE, max_length=20, sa_column_kwargs={"server_default": "active"})
    updated_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
