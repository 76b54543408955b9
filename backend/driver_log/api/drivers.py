# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from driver_log.api.deps import AdminDep, AuthDep, validate_driver_scope
from driver_log.db import SessionDep
from driver_log.schemas.driver import (
    CreateDriverRequest,
    DriverListResponse,
    DriverResponse,
    UpdateDriverRequest,
)
from driver_log.services import driver as driver_service

drivers_router = APIRouter(
    prefix="/drivers",
    tags=["drivers"],
)


@drivers_router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    payload: CreateDriverRequest,
    session: SessionDep,
    auth: AdminDep,
) -> DriverResponse:
    """Register a driver (admin only)."""
    return await driver_service.create_driver(session, auth, payload)


@drivers_router.get("", response_model=DriverListResponse)
async def list_drivers(
    session: SessionDep,
    auth: AdminDep,
    include_inactive: bool = Query(default=False),
) -> DriverListResponse:
    """List drivers (admin only)."""
    return await driver_service.list_drivers(session, include_inactive=include_inactive)


@drivers_router.get(
    "/{driver_id}",
    response_model=DriverResponse,
    dependencies=[Depends(validate_driver_scope)],
)
async def get_driver(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> DriverResponse:
    """Get a single driver."""
    return await driver_service.get_driver(session, driver_id)


@drivers_router.patch("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: uuid.UUID,
    payload: UpdateDriverRequest,
    session: SessionDep,
    auth: AdminDep,
) -> DriverResponse:
    """Update or deactivate a driver (admin only)."""
    return await driver_service.update_driver(session, auth, driver_id, payload)
