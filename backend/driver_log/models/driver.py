from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from driver_log.models.base import TimestampMixin, UUIDBase


class Driver(UUIDBase, TimestampMixin, table=True):
    """A driver whose shifts and leave feed monthly payroll."""

    __tablename__ = "driver"

    name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: str | None = Field(default=None, max_length=50)
    is_active: bool = Field(default=True, index=True, sa_column_kwargs={"server_default": sa.true()})
