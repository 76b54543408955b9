"""Leave request workflow: pending -> approved | rejected (terminal)."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from driver_log.exceptions import ConflictError, NotFoundError
from driver_log.models.enums import AuditAction, AuditEntityType, LeaveStatus, LeaveType
from driver_log.models.leave import LeaveRequest
from driver_log.schemas.leave import LeaveListResponse, LeaveResponse
from driver_log.services.audit import model_to_audit_dict, write_audit_log
from driver_log.services.driver import get_driver_or_404

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from driver_log.schemas.auth import AuthContext
    from driver_log.schemas.leave import LeaveRequestPayload


def build_leave_response(leave: LeaveRequest) -> LeaveResponse:
    """Map a leave model to its response schema."""
    return LeaveResponse(
        id=leave.id,
        driver_id=leave.driver_id,
        leave_date=leave.leave_date,
        leave_type=LeaveType(leave.leave_type),
        status=LeaveStatus(leave.status),
        reason=leave.reason,
        requested_at=leave.requested_at,
        approved_at=leave.approved_at,
        decided_at=leave.decided_at,
        decided_by=leave.decided_by,
    )


async def get_leave_or_404(session: AsyncSession, leave_id: uuid.UUID) -> LeaveRequest:
    """Fetch a leave request by ID. Raises NotFoundError if missing."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == leave_id))
    leave = result.scalar_one_or_none()
    if leave is None:
        raise NotFoundError("Leave request not found")
    return leave


async def request_leave(
    session: AsyncSession,
    auth: AuthContext,
    driver_id: uuid.UUID,
    payload: LeaveRequestPayload,
) -> LeaveResponse:
    """Create a pending leave request. One request per driver per date."""
    await get_driver_or_404(session, driver_id)

    leave = LeaveRequest(
        driver_id=driver_id,
        leave_date=payload.leave_date,
        leave_type=payload.leave_type.value,
        status=LeaveStatus.PENDING.value,
        reason=payload.reason,
    )
    session.add(leave)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(f"Leave already requested for {payload.leave_date.isoformat()}") from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE,
        entity_id=leave.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(leave),
    )
    await session.commit()
    await session.refresh(leave)
    return build_leave_response(leave)


async def _decide(
    session: AsyncSession,
    auth: AuthContext,
    leave_id: uuid.UUID,
    new_status: LeaveStatus,
    audit_action: AuditAction,
) -> LeaveResponse:
    """Shared logic for approve and reject. Only pending requests can be decided."""
    leave = await get_leave_or_404(session, leave_id)
    if leave.status != LeaveStatus.PENDING:
        raise ConflictError(f"Leave request is already {leave.status}")

    before = model_to_audit_dict(leave)
    now = datetime.now(UTC)
    leave.status = new_status.value
    leave.decided_at = now
    leave.decided_by = auth.user_id
    if new_status == LeaveStatus.APPROVED:
        leave.approved_at = now
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE,
        entity_id=leave.id,
        action=audit_action,
        before_json=before,
        after_json=model_to_audit_dict(leave),
    )
    await session.commit()
    await session.refresh(leave)
    return build_leave_response(leave)


async def approve_leave(session: AsyncSession, auth: AuthContext, leave_id: uuid.UUID) -> LeaveResponse:
    return await _decide(session, auth, leave_id, LeaveStatus.APPROVED, AuditAction.APPROVE)


async def reject_leave(session: AsyncSession, auth: AuthContext, leave_id: uuid.UUID) -> LeaveResponse:
    return await _decide(session, auth, leave_id, LeaveStatus.REJECTED, AuditAction.REJECT)


async def list_leaves(
    session: AsyncSession,
    driver_id: uuid.UUID,
    *,
    year: int | None = None,
    status_filter: LeaveStatus | None = None,
) -> LeaveListResponse:
    """List a driver's leave requests by date."""
    await get_driver_or_404(session, driver_id)
    query = select(LeaveRequest).where(col(LeaveRequest.driver_id) == driver_id)
    if year is not None:
        query = query.where(
            col(LeaveRequest.leave_date) >= date(year, 1, 1),
            col(LeaveRequest.leave_date) < date(year + 1, 1, 1),
        )
    if status_filter is not None:
        query = query.where(col(LeaveRequest.status) == status_filter.value)
    result = await session.execute(query.order_by(col(LeaveRequest.leave_date)))
    items = [build_leave_response(lv) for lv in result.scalars().all()]
    return LeaveListResponse(items=items, total=len(items))
