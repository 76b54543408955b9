# ruff: noqa: TC003
"""Read side of leave requests consumed by the payroll engine."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import func, select
from sqlmodel import col

from driver_log.models.enums import LeaveStatus, LeaveType
from driver_log.models.leave import LeaveRequest

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the half-open date interval [first of month, first of next month)."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


@runtime_checkable
class LeaveStore(Protocol):
    """Approved-leave queries per driver."""

    async def get_approved_leaves(self, driver_id: uuid.UUID, year: int, month: int) -> list[LeaveRequest]:
        """Approved leaves of any type dated within the month, oldest first."""
        ...

    async def get_annual_approved_leave_count(
        self,
        driver_id: uuid.UUID,
        year: int,
        *,
        before: date | None = None,
    ) -> int:
        """Count approved annual leaves in ``year``, optionally only those dated before ``before``."""
        ...


class SqlLeaveStore:
    """Leave store backed by the relational database."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_approved_leaves(self, driver_id: uuid.UUID, year: int, month: int) -> list[LeaveRequest]:
        start, end = month_bounds(year, month)
        result = await self._session.execute(
            select(LeaveRequest)
            .where(
                col(LeaveRequest.driver_id) == driver_id,
                col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
                col(LeaveRequest.leave_date) >= start,
                col(LeaveRequest.leave_date) < end,
            )
            .order_by(col(LeaveRequest.leave_date))
        )
        return list(result.scalars().all())

    async def get_annual_approved_leave_count(
        self,
        driver_id: uuid.UUID,
        year: int,
        *,
        before: date | None = None,
    ) -> int:
        filters = [
            col(LeaveRequest.driver_id) == driver_id,
            col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
            col(LeaveRequest.leave_type) == LeaveType.ANNUAL.value,
            col(LeaveRequest.leave_date) >= date(year, 1, 1),
            col(LeaveRequest.leave_date) < (before or date(year + 1, 1, 1)),
        ]
        result = await self._session.execute(select(func.count()).select_from(LeaveRequest).where(*filters))
        return result.scalar_one()


class InMemoryLeaveStore:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._leaves: dict[uuid.UUID, LeaveRequest] = {}

    def seed(self, leave: LeaveRequest) -> None:
        """Seed a leave request for testing."""
        self._leaves[leave.id] = leave

    def _approved(self, driver_id: uuid.UUID) -> list[LeaveRequest]:
        return [
            lv for lv in self._leaves.values() if lv.driver_id == driver_id and lv.status == LeaveStatus.APPROVED
        ]

    async def get_approved_leaves(self, driver_id: uuid.UUID, year: int, month: int) -> list[LeaveRequest]:
        start, end = month_bounds(year, month)
        leaves = [lv for lv in self._approved(driver_id) if start <= lv.leave_date < end]
        return sorted(leaves, key=lambda lv: lv.leave_date)

    async def get_annual_approved_leave_count(
        self,
        driver_id: uuid.UUID,
        year: int,
        *,
        before: date | None = None,
    ) -> int:
        end = before or date(year + 1, 1, 1)
        return sum(
            1
            for lv in self._approved(driver_id)
            if lv.leave_type == LeaveType.ANNUAL and date(year, 1, 1) <= lv.leave_date < end
        )
