# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from driver_log.api.deps import AuthDep, ClockDep, validate_driver_scope
from driver_log.db import SessionDep
from driver_log.schemas.shift import ClockInPayload, ClockOutPayload, ShiftListResponse, ShiftResponse
from driver_log.services import shift as shift_service

shifts_router = APIRouter(
    prefix="/drivers/{driver_id}/shifts",
    tags=["shifts"],
    dependencies=[Depends(validate_driver_scope)],
)


@shifts_router.post("/clock-in", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
async def clock_in(
    driver_id: uuid.UUID,
    payload: ClockInPayload,
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
) -> ShiftResponse:
    """Start a shift at the current local time."""
    return await shift_service.clock_in(session, auth, clock, driver_id, payload.start_odometer)


@shifts_router.post("/clock-out", response_model=ShiftResponse)
async def clock_out(
    driver_id: uuid.UUID,
    payload: ClockOutPayload,
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
) -> ShiftResponse:
    """End the active shift at the current local time."""
    return await shift_service.clock_out(session, auth, clock, driver_id, payload.end_odometer)


@shifts_router.get("/active", response_model=ShiftResponse | None)
async def get_active_shift(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ShiftResponse | None:
    """Return the active shift, or null if the driver is off shift."""
    return await shift_service.get_active_shift(session, driver_id)


@shifts_router.get("", response_model=ShiftListResponse)
async def list_shifts(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
    day: date | None = Query(default=None),
) -> ShiftListResponse:
    """List shifts clocked in on a local calendar day (default: today)."""
    return await shift_service.list_shifts_on_date(session, driver_id, day or clock.today())


@shifts_router.get("/{shift_id}", response_model=ShiftResponse)
async def get_shift(
    driver_id: uuid.UUID,
    shift_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ShiftResponse:
    """Get a single shift."""
    return await shift_service.get_shift(session, driver_id, shift_id)
