"""Driver registration and profile maintenance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from driver_log.exceptions import ConflictError, NotFoundError
from driver_log.models.driver import Driver
from driver_log.models.enums import AuditAction, AuditEntityType
from driver_log.schemas.driver import DriverListResponse, DriverResponse
from driver_log.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from driver_log.schemas.auth import AuthContext
    from driver_log.schemas.driver import CreateDriverRequest, UpdateDriverRequest


def build_driver_response(driver: Driver) -> DriverResponse:
    """Map a driver model to its response schema."""
    return DriverResponse(
        id=driver.id,
        name=driver.name,
        email=driver.email,
        phone=driver.phone,
        is_active=driver.is_active,
        created_at=driver.created_at,
    )


async def get_driver_or_404(session: AsyncSession, driver_id: uuid.UUID) -> Driver:
    """Fetch a driver by ID. Raises NotFoundError if missing."""
    result = await session.execute(select(Driver).where(col(Driver.id) == driver_id))
    driver = result.scalar_one_or_none()
    if driver is None:
        raise NotFoundError("Driver not found")
    return driver


async def create_driver(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateDriverRequest,
) -> DriverResponse:
    """Register a driver. Emails are unique."""
    driver = Driver(name=payload.name, email=payload.email.lower(), phone=payload.phone)
    if payload.id is not None:
        driver.id = payload.id
    session.add(driver)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("A driver with this email or ID already exists") from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.DRIVER,
        entity_id=driver.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(driver),
    )
    await session.commit()
    await session.refresh(driver)
    return build_driver_response(driver)


async def update_driver(
    session: AsyncSession,
    auth: AuthContext,
    driver_id: uuid.UUID,
    payload: UpdateDriverRequest,
) -> DriverResponse:
    """Update a driver's profile or deactivate them."""
    driver = await get_driver_or_404(session, driver_id)
    before = model_to_audit_dict(driver)

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(driver, key, value)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.DRIVER,
        entity_id=driver.id,
        action=AuditAction.UPDATE,
        before_json=before,
        after_json=model_to_audit_dict(driver),
    )
    await session.commit()
    await session.refresh(driver)
    return build_driver_response(driver)


async def get_driver(session: AsyncSession, driver_id: uuid.UUID) -> DriverResponse:
    return build_driver_response(await get_driver_or_404(session, driver_id))


async def list_drivers(session: AsyncSession, *, include_inactive: bool = False) -> DriverListResponse:
    """List drivers ordered by name."""
    query = select(Driver).order_by(col(Driver.name), col(Driver.id))
    if not include_inactive:
        query = query.where(col(Driver.is_active).is_(True))
    result = await session.execute(query)
    items = [build_driver_response(d) for d in result.scalars().all()]
    return DriverListResponse(items=items, total=len(items))
