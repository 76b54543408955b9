# ruff: noqa: B008, TC001, TC003
"""Payroll endpoints: per-driver results, company-wide batches, rate configuration."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from driver_log.api.deps import AdminDep, AuthDep, ClockDep, validate_driver_scope
from driver_log.db import SessionDep
from driver_log.schemas.payroll import (
    CreatePayrollConfigRequest,
    PayrollBatchResponse,
    PayrollConfigResponse,
    PayrollResponse,
    YearToDateResponse,
)
from driver_log.services import payroll_config as config_service
from driver_log.services import report as report_service

driver_payroll_router = APIRouter(
    prefix="/drivers/{driver_id}/payroll",
    tags=["payroll"],
    dependencies=[Depends(validate_driver_scope)],
)

payroll_router = APIRouter(
    prefix="/payroll",
    tags=["payroll"],
)


@driver_payroll_router.get("", response_model=PayrollResponse)
async def get_driver_payroll(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
    year: int = Query(),
    month: int = Query(),
) -> PayrollResponse:
    """Monthly payroll breakdown for one driver."""
    return await report_service.get_driver_payroll(session, clock, driver_id, year, month)


@driver_payroll_router.get("/ytd", response_model=YearToDateResponse)
async def get_driver_year_to_date(
    driver_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
    year: int = Query(),
) -> YearToDateResponse:
    """Year-to-date payroll for one driver."""
    return await report_service.get_driver_year_to_date(session, clock, driver_id, year)


@payroll_router.get("/summary", response_model=PayrollBatchResponse)
async def get_monthly_summary(
    session: SessionDep,
    auth: AdminDep,
    clock: ClockDep,
    year: int = Query(),
    month: int = Query(),
) -> PayrollBatchResponse:
    """Monthly payroll for every active driver (admin only)."""
    return await report_service.get_monthly_summary(session, clock, year, month)


@payroll_router.get("/ytd", response_model=PayrollBatchResponse)
async def get_year_to_date_summary(
    session: SessionDep,
    auth: AdminDep,
    clock: ClockDep,
    year: int = Query(),
) -> PayrollBatchResponse:
    """Year-to-date payroll for every active driver (admin only)."""
    return await report_service.get_year_to_date_summary(session, clock, year)


@payroll_router.get("/config", response_model=PayrollConfigResponse)
async def get_payroll_config(
    session: SessionDep,
    auth: AuthDep,
    clock: ClockDep,
) -> PayrollConfigResponse:
    """The payroll rates in force today."""
    return await config_service.get_active_config_response(session, clock.today())


@payroll_router.post("/config", response_model=PayrollConfigResponse, status_code=status.HTTP_201_CREATED)
async def create_payroll_config(
    payload: CreatePayrollConfigRequest,
    session: SessionDep,
    auth: AdminDep,
) -> PayrollConfigResponse:
    """Publish a new payroll configuration version (admin only)."""
    return await config_service.create_config_version(session, auth, payload)
