# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from driver_log.api.deps import AdminDep, AuthDep, validate_driver_scope
from driver_log.db import SessionDep
from driver_log.models.enums import LeaveStatus
from driver_log.schemas.leave import LeaveListResponse, LeaveRequestPayload, LeaveResponse
from driver_log.services import leave as leave_service

driver_leaves_router = APIRouter(
    prefix="/drivers/{driver_id}/leaves",
    tags=["leaves"],
    dependencies=[Depends(validate_driver_scope)],
)

leave_decisions_router = APIRouter(
    prefix="/leaves",
    tags=["leaves"],
)


@driver_leaves_router.post("", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
async def request_leave(
    driver_id: uuid.UUID,
    payload: LeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveResponse:
    """Request a day of leave."""
    return await leave_service.request_leave(session, auth, driver_id, payload)


@driver_leaves_router.get("", response_model=LeaveListResponse)
async def list_leaves(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1, le=9999),
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
) -> LeaveListResponse:
    """List a driver's leave requests."""
    return await leave_service.list_leaves(session, driver_id, year=year, status_filter=status_filter)


@leave_decisions_router.post("/{leave_id}/approve", response_model=LeaveResponse)
async def approve_leave(
    leave_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveResponse:
    """Approve a pending leave request (admin only)."""
    return await leave_service.approve_leave(session, auth, leave_id)


@leave_decisions_router.post("/{leave_id}/reject", response_model=LeaveResponse)
async def reject_leave(
    leave_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveResponse:
    """Reject a pending leave request (admin only)."""
    return await leave_service.reject_leave(session, auth, leave_id)
