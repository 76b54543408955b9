# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from driver_log.models.base import UUIDBase
from driver_log.models.enums import LeaveStatus, LeaveType


def _now_utc() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class LeaveRequest(UUIDBase, table=True):
    """A driver's request for one day of leave, with its approval state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.UniqueConstraint("driver_id", "leave_date", name="uq_leave_driver_date"),
        sa.Index("ix_leave_driver_status_date", "driver_id", "status", "leave_date"),
    )

    driver_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("driver.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_date: datetime.date
    leave_type: str = Field(default=LeaveType.ANNUAL, max_length=20)
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "pending"}
    )
    reason: str | None = None
    requested_at: datetime.datetime = Field(
        default_factory=_now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    approved_at: datetime.datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    decided_at: datetime.datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    decided_by: uuid.UUID | None = None
