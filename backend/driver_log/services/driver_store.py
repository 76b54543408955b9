# ruff: noqa: TC003
"""Directory of drivers the payroll aggregator iterates over."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import select
from sqlmodel import col

from driver_log.models.driver import Driver

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class DriverStore(Protocol):
    """Interface for looking up drivers."""

    async def get_driver(self, driver_id: uuid.UUID) -> Driver | None:
        """Fetch a driver. Returns None if not found."""
        ...

    async def list_active_drivers(self) -> list[Driver]:
        """List all active drivers, ordered by name."""
        ...


class SqlDriverStore:
    """Driver store backed by the relational database."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_driver(self, driver_id: uuid.UUID) -> Driver | None:
        result = await self._session.execute(select(Driver).where(col(Driver.id) == driver_id))
        return result.scalar_one_or_none()

    async def list_active_drivers(self) -> list[Driver]:
        result = await self._session.execute(
            select(Driver).where(col(Driver.is_active).is_(True)).order_by(col(Driver.name), col(Driver.id))
        )
        return list(result.scalars().all())


class InMemoryDriverStore:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._drivers: dict[uuid.UUID, Driver] = {}

    def seed(self, driver: Driver) -> None:
        """Seed a driver for testing."""
        self._drivers[driver.id] = driver

    async def get_driver(self, driver_id: uuid.UUID) -> Driver | None:
        return self._drivers.get(driver_id)

    async def list_active_drivers(self) -> list[Driver]:
        active = [d for d in self._drivers.values() if d.is_active]
        return sorted(active, key=lambda d: (d.name, str(d.id)))
