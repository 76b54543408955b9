# ruff: noqa: TC003
"""Versioned payroll rates. Every computation uses the version active today."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from driver_log.config import get_settings
from driver_log.exceptions import ConflictError
from driver_log.models.enums import AuditAction, AuditEntityType
from driver_log.models.payroll_config import PayrollConfigVersion
from driver_log.schemas.payroll import PayrollConfigResponse
from driver_log.services.audit import model_to_audit_dict, write_audit_log
from driver_log.services.payroll import PayrollConfig

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from driver_log.schemas.auth import AuthContext
    from driver_log.schemas.payroll import CreatePayrollConfigRequest


async def _get_version_active_on(session: AsyncSession, on: date) -> PayrollConfigVersion | None:
    result = await session.execute(
        select(PayrollConfigVersion)
        .where(col(PayrollConfigVersion.effective_from) <= on)
        .order_by(col(PayrollConfigVersion.version).desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def _default_config() -> PayrollConfig:
    settings = get_settings()
    return PayrollConfig(
        base_salary=settings.base_salary,
        overtime_rate_per_hour=settings.overtime_rate_per_hour,
        fuel_allowance_per_day=settings.fuel_allowance_per_day,
        annual_leave_allowance=settings.annual_leave_allowance,
    )


async def get_active_config(session: AsyncSession, today: date) -> PayrollConfig:
    """Return the payroll rates in force on ``today``, falling back to settings."""
    version = await _get_version_active_on(session, today)
    if version is None:
        return _default_config()
    return PayrollConfig(
        base_salary=version.base_salary,
        overtime_rate_per_hour=version.overtime_rate_per_hour,
        fuel_allowance_per_day=version.fuel_allowance_per_day,
        annual_leave_allowance=get_settings().annual_leave_allowance,
    )


async def get_active_config_response(session: AsyncSession, today: date) -> PayrollConfigResponse:
    """Describe the configuration in force on ``today``."""
    version = await _get_version_active_on(session, today)
    allowance = get_settings().annual_leave_allowance
    if version is None:
        config = _default_config()
        return PayrollConfigResponse(
            version=None,
            base_salary=config.base_salary,
            overtime_rate_per_hour=config.overtime_rate_per_hour,
            fuel_allowance_per_day=config.fuel_allowance_per_day,
            annual_leave_allowance=allowance,
            effective_from=None,
            created_at=None,
        )
    return _build_config_response(version, allowance)


def _build_config_response(version: PayrollConfigVersion, allowance: int) -> PayrollConfigResponse:
    return PayrollConfigResponse(
        version=version.version,
        base_salary=version.base_salary,
        overtime_rate_per_hour=version.overtime_rate_per_hour,
        fuel_allowance_per_day=version.fuel_allowance_per_day,
        annual_leave_allowance=allowance,
        effective_from=version.effective_from,
        created_at=version.created_at,
    )


async def create_config_version(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreatePayrollConfigRequest,
) -> PayrollConfigResponse:
    """Publish a new configuration version numbered after the latest one."""
    latest = await session.execute(select(func.max(col(PayrollConfigVersion.version))))
    next_version = (latest.scalar_one_or_none() or 0) + 1

    version = PayrollConfigVersion(
        version=next_version,
        base_salary=payload.base_salary,
        overtime_rate_per_hour=payload.overtime_rate_per_hour,
        fuel_allowance_per_day=payload.fuel_allowance_per_day,
        effective_from=payload.effective_from,
    )
    session.add(version)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("A payroll configuration version was published concurrently") from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.PAYROLL_CONFIG,
        entity_id=version.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(version),
    )
    await session.commit()
    await session.refresh(version)
    return _build_config_response(version, get_settings().annual_leave_allowance)
