# ruff: noqa: TC003
"""Shift state machine: NoActiveShift -> Active -> NoActiveShift.

The lifecycle is the only writer of shifts. It validates odometer readings
and the one-active-shift rule before touching the store, so a rejected
clock-in or clock-out never leaves a partial write behind.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from driver_log.exceptions import (
    InvalidOdometer,
    NoActiveShift,
    OdometerRegression,
    ShiftAlreadyActive,
    ShiftTooShort,
)
from driver_log.models.enums import ShiftStatus
from driver_log.models.shift import Shift

if TYPE_CHECKING:
    from driver_log.services.clock import Clock
    from driver_log.services.shift_store import ShiftStore

logger = logging.getLogger(__name__)


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two local timestamps, rounded half up."""
    seconds = int((end - start).total_seconds())
    return max(0, (seconds + 30) // 60)


class ShiftLifecycle:
    """Clock drivers in and out against an injected store and clock."""

    def __init__(self, store: ShiftStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock

    async def clock_in(self, driver_id: uuid.UUID, start_odometer: int) -> uuid.UUID:
        """Open a new active shift and return its ID.

        Raises:
            InvalidOdometer: ``start_odometer`` is negative.
            ShiftAlreadyActive: the driver already has an open shift.
            OdometerRegression: ``start_odometer`` is below the last completed
                shift's ``end_odometer``.
        """
        if start_odometer < 0:
            raise InvalidOdometer("Start odometer must be non-negative")

        if await self._store.get_active_shift(driver_id) is not None:
            logger.info("Clock-in rejected for driver=%s: shift already active", driver_id)
            raise ShiftAlreadyActive

        last = await self._store.get_last_completed_shift(driver_id)
        if last is not None and last.end_odometer is not None and start_odometer < last.end_odometer:
            logger.info(
                "Clock-in rejected for driver=%s: odometer %d below previous end %d",
                driver_id,
                start_odometer,
                last.end_odometer,
            )
            raise OdometerRegression(
                f"Start odometer {start_odometer} is below the previous shift's end odometer {last.end_odometer}"
            )

        shift = Shift(
            driver_id=driver_id,
            clock_in_time=self._clock.now(),
            start_odometer=start_odometer,
            status=ShiftStatus.ACTIVE.value,
        )
        shift_id = await self._store.insert_shift(shift)
        logger.info("Driver %s clocked in at %s (shift=%s)", driver_id, shift.clock_in_time, shift_id)
        return shift_id

    async def clock_out(self, driver_id: uuid.UUID, end_odometer: int) -> Shift:
        """Complete the driver's active shift and return it.

        Raises:
            NoActiveShift: the driver has no open shift.
            InvalidOdometer: ``end_odometer`` is below the shift's start.
            ShiftTooShort: the clock has not moved past the clock-in minute.
        """
        active = await self._store.get_active_shift(driver_id)
        if active is None:
            logger.info("Clock-out rejected for driver=%s: no active shift", driver_id)
            raise NoActiveShift

        if end_odometer < active.start_odometer:
            raise InvalidOdometer(
                f"End odometer {end_odometer} is below the shift's start odometer {active.start_odometer}"
            )

        clock_out_time = self._clock.now()
        if clock_out_time <= active.clock_in_time:
            logger.info("Clock-out rejected for driver=%s: shift started at %s", driver_id, active.clock_in_time)
            raise ShiftTooShort

        shift = await self._store.update_shift_on_clock_out(
            active.id,
            clock_out_time=clock_out_time,
            end_odometer=end_odometer,
            total_distance=end_odometer - active.start_odometer,
            duration_minutes=elapsed_minutes(active.clock_in_time, clock_out_time),
        )
        logger.info(
            "Driver %s clocked out at %s (shift=%s, %d min, %d km)",
            driver_id,
            clock_out_time,
            shift.id,
            shift.duration_minutes,
            shift.total_distance,
        )
        return shift
