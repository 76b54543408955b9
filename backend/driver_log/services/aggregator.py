# ruff: noqa: TC003
"""Payroll across drivers (monthly summary) and across months (year-to-date)."""

from __future__ import annotations

import logging
import uuid
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from driver_log.exceptions import InvalidPeriod, NotFoundError
from driver_log.services.leave_store import month_bounds
from driver_log.services.payroll import PayrollResult, YearToDateResult, validate_period

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager

    from driver_log.models.driver import Driver
    from driver_log.services.clock import Clock
    from driver_log.services.driver_store import DriverStore
    from driver_log.services.leave_store import LeaveStore
    from driver_log.services.payroll import PayrollEngine
    from driver_log.services.shift_store import ShiftStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass
class DriverPayrollEntry:
    """One driver's outcome within a batch: a result, or the error that stopped it."""

    driver: Driver
    result: PayrollResult | YearToDateResult | None = None
    error: str | None = None


@dataclass
class PayrollBatch:
    """Summary of a payroll run over all active drivers."""

    year: int
    month: int | None = None
    entries: list[DriverPayrollEntry] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.entries)

    @property
    def errors(self) -> int:
        return sum(1 for e in self.entries if e.error is not None)


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class PayrollAggregator:
    """Fetches payroll inputs from the stores and runs the engine over them.

    Read-only: nothing here writes to any store. In batches each driver runs
    inside its own ``unit_of_work()`` (a savepoint on a SQL session).
    """

    def __init__(
        self,
        engine: PayrollEngine,
        shifts: ShiftStore,
        leaves: LeaveStore,
        drivers: DriverStore,
        clock: Clock,
        unit_of_work: Callable[[], AbstractAsyncContextManager[Any]] = nullcontext,
    ) -> None:
        self._engine = engine
        self._shifts = shifts
        self._leaves = leaves
        self._drivers = drivers
        self._clock = clock
        self._unit_of_work = unit_of_work

    async def _require_driver(self, driver_id: uuid.UUID) -> Driver:
        driver = await self._drivers.get_driver(driver_id)
        if driver is None:
            raise NotFoundError("Driver not found")
        return driver

    def _last_month_of(self, year: int) -> int:
        """Last month to include in a year-to-date run for ``year``."""
        today = self._clock.today()
        if year > today.year:
            raise InvalidPeriod(f"Year {year} has not started yet")
        return today.month if year == today.year else 12

    async def _compute_month(
        self,
        driver_id: uuid.UUID,
        year: int,
        month: int,
        *,
        annual_leave_count: int | None = None,
    ) -> PayrollResult:
        start, end = month_bounds(year, month)
        shifts = await self._shifts.get_shifts_in_range(
            driver_id,
            datetime(start.year, start.month, start.day),
            datetime(end.year, end.month, end.day),
        )
        leaves = await self._leaves.get_approved_leaves(driver_id, year, month)
        before_month = await self._leaves.get_annual_approved_leave_count(driver_id, year, before=start)
        if annual_leave_count is None:
            annual_leave_count = await self._leaves.get_annual_approved_leave_count(driver_id, year)
        return self._engine.compute(
            driver_id,
            year,
            month,
            shifts,
            leaves,
            annual_leaves_before_month=before_month,
            annual_leave_count=annual_leave_count,
        )

    async def _compute_year(self, driver_id: uuid.UUID, year: int, last_month: int) -> YearToDateResult:
        # Fetched once for the year; summing monthly counters would double count.
        annual_leave_count = await self._leaves.get_annual_approved_leave_count(driver_id, year)
        months = [
            await self._compute_month(driver_id, year, month, annual_leave_count=annual_leave_count)
            for month in range(1, last_month + 1)
        ]
        return YearToDateResult.from_months(
            driver_id,
            year,
            months,
            annual_leaves_used=annual_leave_count,
            annual_leave_allowance=self._engine.config.annual_leave_allowance,
        )

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def driver_month(self, driver_id: uuid.UUID, year: int, month: int) -> PayrollResult:
        """Payroll for one driver and month. Store errors propagate."""
        validate_period(year, month)
        await self._require_driver(driver_id)
        return await self._compute_month(driver_id, year, month)

    async def driver_year_to_date(self, driver_id: uuid.UUID, year: int) -> YearToDateResult:
        """Year-to-date payroll for one driver."""
        validate_period(year, 1)
        last_month = self._last_month_of(year)
        await self._require_driver(driver_id)
        return await self._compute_year(driver_id, year, last_month)

    async def monthly_summary(self, year: int, month: int) -> PayrollBatch:
        """Run payroll for every active driver.

        A failure for one driver is logged and recorded on that driver's
        entry; the other entries are kept.
        """
        validate_period(year, month)
        batch = PayrollBatch(year=year, month=month)
        for driver in await self._drivers.list_active_drivers():
            entry = DriverPayrollEntry(driver=driver)
            try:
                async with self._unit_of_work():
                    entry.result = await self._compute_month(driver.id, year, month)
            except Exception as exc:
                logger.exception("Payroll failed for driver=%s period=%d-%02d", driver.id, year, month)
                entry.error = str(exc) or type(exc).__name__
            batch.entries.append(entry)
        logger.info("Monthly payroll %d-%02d: processed=%d errors=%d", year, month, batch.processed, batch.errors)
        return batch

    async def year_to_date(self, year: int) -> PayrollBatch:
        """Year-to-date payroll for every active driver, January through the current month."""
        validate_period(year, 1)
        last_month = self._last_month_of(year)
        batch = PayrollBatch(year=year)
        for driver in await self._drivers.list_active_drivers():
            entry = DriverPayrollEntry(driver=driver)
            try:
                async with self._unit_of_work():
                    entry.result = await self._compute_year(driver.id, year, last_month)
            except Exception as exc:
                logger.exception("Year-to-date payroll failed for driver=%s year=%d", driver.id, year)
                entry.error = str(exc) or type(exc).__name__
            batch.entries.append(entry)
        logger.info("Year-to-date payroll %d: processed=%d errors=%d", year, batch.processed, batch.errors)
        return batch
