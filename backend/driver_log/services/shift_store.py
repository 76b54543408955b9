# ruff: noqa: TC003
"""Durable record of shifts keyed by driver."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from driver_log.exceptions import NoActiveShift, ShiftAlreadyActive
from driver_log.models.enums import ShiftStatus
from driver_log.models.shift import Shift

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class ShiftStore(Protocol):
    """Shift queries and mutations the lifecycle and payroll engine rely on."""

    async def get_shift(self, shift_id: uuid.UUID) -> Shift | None:
        """Fetch a shift by ID. Returns None if not found."""
        ...

    async def get_active_shift(self, driver_id: uuid.UUID) -> Shift | None:
        """Return the driver's active shift, if any."""
        ...

    async def get_last_completed_shift(self, driver_id: uuid.UUID) -> Shift | None:
        """Return the driver's most recently completed shift, if any."""
        ...

    async def insert_shift(self, shift: Shift) -> uuid.UUID:
        """Insert a new active shift. Raises ShiftAlreadyActive on conflict."""
        ...

    async def update_shift_on_clock_out(
        self,
        shift_id: uuid.UUID,
        *,
        clock_out_time: datetime,
        end_odometer: int,
        total_distance: int,
        duration_minutes: int,
    ) -> Shift:
        """Complete an active shift. Raises NoActiveShift if it is no longer active."""
        ...

    async def get_shifts_in_range(self, driver_id: uuid.UUID, start: datetime, end: datetime) -> list[Shift]:
        """Completed shifts with ``start <= clock_in_time < end``, oldest first."""
        ...

    async def get_shifts_on_date(self, driver_id: uuid.UUID, day: date) -> list[Shift]:
        """All shifts clocked in on ``day``, newest first."""
        ...


# ---------------------------------------------------------------------------
# SQL implementation
# ---------------------------------------------------------------------------


class SqlShiftStore:
    """Shift store backed by the relational database.

    The partial unique index ``uq_shift_one_active_per_driver`` is what makes
    ``insert_shift`` atomic against concurrent clock-ins.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_shift(self, shift_id: uuid.UUID) -> Shift | None:
        result = await self._session.execute(select(Shift).where(col(Shift.id) == shift_id))
        return result.scalar_one_or_none()

    async def get_active_shift(self, driver_id: uuid.UUID) -> Shift | None:
        result = await self._session.execute(
            select(Shift)
            .where(
                col(Shift.driver_id) == driver_id,
                col(Shift.status) == ShiftStatus.ACTIVE.value,
            )
            .order_by(col(Shift.clock_in_time).desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_last_completed_shift(self, driver_id: uuid.UUID) -> Shift | None:
        result = await self._session.execute(
            select(Shift)
            .where(
                col(Shift.driver_id) == driver_id,
                col(Shift.status) == ShiftStatus.COMPLETED.value,
            )
            .order_by(col(Shift.clock_out_time).desc(), col(Shift.clock_in_time).desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def insert_shift(self, shift: Shift) -> uuid.UUID:
        self._session.add(shift)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise ShiftAlreadyActive from None
        return shift.id

    async def update_shift_on_clock_out(
        self,
        shift_id: uuid.UUID,
        *,
        clock_out_time: datetime,
        end_odometer: int,
        total_distance: int,
        duration_minutes: int,
    ) -> Shift:
        result = await self._session.execute(
            select(Shift)
            .where(
                col(Shift.id) == shift_id,
                col(Shift.status) == ShiftStatus.ACTIVE.value,
            )
            .with_for_update()
        )
        shift = result.scalar_one_or_none()
        if shift is None:
            raise NoActiveShift
        shift.clock_out_time = clock_out_time
        shift.end_odometer = end_odometer
        shift.total_distance = total_distance
        shift.duration_minutes = duration_minutes
        shift.status = ShiftStatus.COMPLETED.value
        await self._session.flush()
        return shift

    async def get_shifts_in_range(self, driver_id: uuid.UUID, start: datetime, end: datetime) -> list[Shift]:
        result = await self._session.execute(
            select(Shift)
            .where(
                col(Shift.driver_id) == driver_id,
                col(Shift.status) == ShiftStatus.COMPLETED.value,
                col(Shift.clock_in_time) >= start,
                col(Shift.clock_in_time) < end,
            )
            .order_by(col(Shift.clock_in_time))
        )
        return list(result.scalars().all())

    async def get_shifts_on_date(self, driver_id: uuid.UUID, day: date) -> list[Shift]:
        start = datetime(day.year, day.month, day.day)
        result = await self._session.execute(
            select(Shift)
            .where(
                col(Shift.driver_id) == driver_id,
                col(Shift.clock_in_time) >= start,
                col(Shift.clock_in_time) < start + timedelta(days=1),
            )
            .order_by(col(Shift.clock_in_time).desc())
        )
        return list(result.scalars().all())


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class InMemoryShiftStore:
    """In-memory stub implementation for development and tests.

    No method awaits between its check and its write, so each call is atomic
    on a single event loop.
    """

    def __init__(self) -> None:
        self._shifts: dict[uuid.UUID, Shift] = {}

    def seed(self, shift: Shift) -> None:
        """Seed a shift for testing, bypassing all checks."""
        self._shifts[shift.id] = shift

    def _for_driver(self, driver_id: uuid.UUID) -> list[Shift]:
        return [s for s in self._shifts.values() if s.driver_id == driver_id]

    async def get_shift(self, shift_id: uuid.UUID) -> Shift | None:
        return self._shifts.get(shift_id)

    async def get_active_shift(self, driver_id: uuid.UUID) -> Shift | None:
        active = [s for s in self._for_driver(driver_id) if s.status == ShiftStatus.ACTIVE]
        return max(active, key=lambda s: s.clock_in_time, default=None)

    async def get_last_completed_shift(self, driver_id: uuid.UUID) -> Shift | None:
        completed = [s for s in self._for_driver(driver_id) if s.status == ShiftStatus.COMPLETED]
        return max(completed, key=lambda s: (s.clock_out_time, s.clock_in_time), default=None)

    async def insert_shift(self, shift: Shift) -> uuid.UUID:
        if any(s.status == ShiftStatus.ACTIVE for s in self._for_driver(shift.driver_id)):
            raise ShiftAlreadyActive
        self._shifts[shift.id] = shift
        return shift.id

    async def update_shift_on_clock_out(
        self,
        shift_id: uuid.UUID,
        *,
        clock_out_time: datetime,
        end_odometer: int,
        total_distance: int,
        duration_minutes: int,
    ) -> Shift:
        shift = self._shifts.get(shift_id)
        if shift is None or shift.status != ShiftStatus.ACTIVE:
            raise NoActiveShift
        shift.clock_out_time = clock_out_time
        shift.end_odometer = end_odometer
        shift.total_distance = total_distance
        shift.duration_minutes = duration_minutes
        shift.status = ShiftStatus.COMPLETED.value
        return shift

    async def get_shifts_in_range(self, driver_id: uuid.UUID, start: datetime, end: datetime) -> list[Shift]:
        shifts = [
            s
            for s in self._for_driver(driver_id)
            if s.status == ShiftStatus.COMPLETED and start <= s.clock_in_time < end
        ]
        return sorted(shifts, key=lambda s: s.clock_in_time)

    async def get_shifts_on_date(self, driver_id: uuid.UUID, day: date) -> list[Shift]:
        shifts = [s for s in self._for_driver(driver_id) if s.clock_in_time.date() == day]
        return sorted(shifts, key=lambda s: s.clock_in_time, reverse=True)
