"""Reporting service: audit log queries and payroll reports."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from driver_log.models.audit import AuditLog
from driver_log.schemas.payroll import (
    PayrollBatchResponse,
    PayrollEntryResponse,
    PayrollResponse,
    YearToDateResponse,
)
from driver_log.schemas.report import AuditLogEntryResponse, AuditLogListResponse
from driver_log.services.aggregator import PayrollAggregator
from driver_log.services.driver import build_driver_response
from driver_log.services.driver_store import SqlDriverStore
from driver_log.services.leave_store import SqlLeaveStore
from driver_log.services.payroll import PayrollEngine, PayrollResult
from driver_log.services.payroll_config import get_active_config
from driver_log.services.shift_store import SqlShiftStore

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from driver_log.services.aggregator import PayrollBatch
    from driver_log.services.clock import Clock
    from driver_log.services.payroll import YearToDateResult


async def query_audit_log(
    session: AsyncSession,
    *,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action: str | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Query audit log entries with optional filters."""
    filters = []

    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= start_date)
    if end_date is not None:
        filters.append(col(AuditLog.created_at) <= end_date)

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    entries = list(result.scalars().all())

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )


# ---------------------------------------------------------------------------
# Payroll
# ---------------------------------------------------------------------------


async def build_aggregator(session: AsyncSession, clock: Clock) -> PayrollAggregator:
    """Wire the SQL stores and today's payroll configuration into an aggregator."""
    config = await get_active_config(session, clock.today())
    return PayrollAggregator(
        PayrollEngine(config),
        SqlShiftStore(session),
        SqlLeaveStore(session),
        SqlDriverStore(session),
        clock,
        unit_of_work=session.begin_nested,
    )


def build_payroll_response(result: PayrollResult) -> PayrollResponse:
    """Round a monthly result to cents and map it to its response schema."""
    return PayrollResponse(**asdict(result.rounded()))


def build_year_to_date_response(result: YearToDateResult) -> YearToDateResponse:
    """Round a year-to-date result to cents and map it to its response schema."""
    return YearToDateResponse(**asdict(result.rounded()))


def _build_batch_response(batch: PayrollBatch) -> PayrollBatchResponse:
    items: list[PayrollEntryResponse] = []
    for entry in batch.entries:
        payroll: PayrollResponse | YearToDateResponse | None = None
        if isinstance(entry.result, PayrollResult):
            payroll = build_payroll_response(entry.result)
        elif entry.result is not None:
            payroll = build_year_to_date_response(entry.result)
        items.append(
            PayrollEntryResponse(driver=build_driver_response(entry.driver), payroll=payroll, error=entry.error)
        )
    return PayrollBatchResponse(
        year=batch.year,
        month=batch.month,
        items=items,
        total=batch.processed,
        errors=batch.errors,
    )


async def get_driver_payroll(
    session: AsyncSession,
    clock: Clock,
    driver_id: uuid.UUID,
    year: int,
    month: int,
) -> PayrollResponse:
    aggregator = await build_aggregator(session, clock)
    return build_payroll_response(await aggregator.driver_month(driver_id, year, month))


async def get_driver_year_to_date(
    session: AsyncSession,
    clock: Clock,
    driver_id: uuid.UUID,
    year: int,
) -> YearToDateResponse:
    aggregator = await build_aggregator(session, clock)
    return build_year_to_date_response(await aggregator.driver_year_to_date(driver_id, year))


async def get_monthly_summary(session: AsyncSession, clock: Clock, year: int, month: int) -> PayrollBatchResponse:
    aggregator = await build_aggregator(session, clock)
    return _build_batch_response(await aggregator.monthly_summary(year, month))


async def get_year_to_date_summary(session: AsyncSession, clock: Clock, year: int) -> PayrollBatchResponse:
    aggregator = await build_aggregator(session, clock)
    return _build_batch_response(await aggregator.year_to_date(year))
