# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from driver_log.models.enums import ShiftStatus


class ClockInPayload(BaseModel):
    """Request body for starting a shift."""

    start_odometer: int = Field(ge=0)


class ClockOutPayload(BaseModel):
    """Request body for ending a shift."""

    end_odometer: int = Field(ge=0)


class ShiftResponse(BaseModel):
    """Response schema for a shift. Times are local wall-clock time."""

    id: uuid.UUID
    driver_id: uuid.UUID
    clock_in_time: datetime
    clock_out_time: datetime | None
    start_odometer: int
    end_odometer: int | None
    total_distance: int | None
    duration_minutes: int | None
    status: ShiftStatus


class ShiftListResponse(BaseModel):
    """List of shifts."""

    items: list[ShiftResponse]
    total: int
