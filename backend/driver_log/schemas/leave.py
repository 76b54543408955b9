# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from driver_log.models.enums import LeaveStatus, LeaveType


class LeaveRequestPayload(BaseModel):
    """Request body for requesting a day of leave."""

    leave_date: date
    leave_type: LeaveType = LeaveType.ANNUAL
    reason: str | None = Field(default=None, max_length=1000)


class LeaveResponse(BaseModel):
    """Response schema for a leave request."""

    id: uuid.UUID
    driver_id: uuid.UUID
    leave_date: date
    leave_type: LeaveType
    status: LeaveStatus
    reason: str | None
    requested_at: datetime
    approved_at: datetime | None
    decided_at: datetime | None
    decided_by: uuid.UUID | None


class LeaveListResponse(BaseModel):
    """List of leave requests."""

    items: list[LeaveResponse]
    total: int
