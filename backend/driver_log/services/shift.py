"""Clock-in / clock-out use cases: lifecycle + audit in one transaction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from driver_log.exceptions import ConflictError, NotFoundError
from driver_log.models.enums import AuditAction, AuditEntityType, ShiftStatus
from driver_log.schemas.shift import ShiftListResponse, ShiftResponse
from driver_log.services.audit import model_to_audit_dict, write_audit_log
from driver_log.services.driver import get_driver_or_404
from driver_log.services.lifecycle import ShiftLifecycle
from driver_log.services.shift_store import SqlShiftStore

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from driver_log.models.shift import Shift
    from driver_log.schemas.auth import AuthContext
    from driver_log.services.clock import Clock


def build_shift_response(shift: Shift) -> ShiftResponse:
    """Map a shift model to its response schema."""
    return ShiftResponse(
        id=shift.id,
        driver_id=shift.driver_id,
        clock_in_time=shift.clock_in_time,
        clock_out_time=shift.clock_out_time,
        start_odometer=shift.start_odometer,
        end_odometer=shift.end_odometer,
        total_distance=shift.total_distance,
        duration_minutes=shift.duration_minutes,
        status=ShiftStatus(shift.status),
    )


async def clock_in(
    session: AsyncSession,
    auth: AuthContext,
    clock: Clock,
    driver_id: uuid.UUID,
    start_odometer: int,
) -> ShiftResponse:
    """Start a shift for an active driver."""
    driver = await get_driver_or_404(session, driver_id)
    if not driver.is_active:
        raise ConflictError("Driver is inactive")

    store = SqlShiftStore(session)
    shift_id = await ShiftLifecycle(store, clock).clock_in(driver_id, start_odometer)
    shift = await store.get_shift(shift_id)
    if shift is None:
        raise NotFoundError("Shift not found")

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.SHIFT,
        entity_id=shift.id,
        action=AuditAction.CLOCK_IN,
        after_json=model_to_audit_dict(shift),
    )
    await session.commit()
    await session.refresh(shift)
    return build_shift_response(shift)


async def clock_out(
    session: AsyncSession,
    auth: AuthContext,
    clock: Clock,
    driver_id: uuid.UUID,
    end_odometer: int,
) -> ShiftResponse:
    """Complete the driver's active shift."""
    await get_driver_or_404(session, driver_id)

    store = SqlShiftStore(session)
    active = await store.get_active_shift(driver_id)
    before = model_to_audit_dict(active) if active is not None else None

    shift = await ShiftLifecycle(store, clock).clock_out(driver_id, end_odometer)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.SHIFT,
        entity_id=shift.id,
        action=AuditAction.CLOCK_OUT,
        before_json=before,
        after_json=model_to_audit_dict(shift),
    )
    await session.commit()
    await session.refresh(shift)
    return build_shift_response(shift)


async def get_active_shift(session: AsyncSession, driver_id: uuid.UUID) -> ShiftResponse | None:
    await get_driver_or_404(session, driver_id)
    shift = await SqlShiftStore(session).get_active_shift(driver_id)
    return build_shift_response(shift) if shift is not None else None


async def get_shift(session: AsyncSession, driver_id: uuid.UUID, shift_id: uuid.UUID) -> ShiftResponse:
    shift = await SqlShiftStore(session).get_shift(shift_id)
    if shift is None or shift.driver_id != driver_id:
        raise NotFoundError("Shift not found")
    return build_shift_response(shift)


async def list_shifts_on_date(session: AsyncSession, driver_id: uuid.UUID, day: date) -> ShiftListResponse:
    """A driver's shifts clocked in on a local calendar day, newest first."""
    await get_driver_or_404(session, driver_id)
    shifts = await SqlShiftStore(session).get_shifts_on_date(driver_id, day)
    return ShiftListResponse(items=[build_shift_response(s) for s in shifts], total=len(shifts))
