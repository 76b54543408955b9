# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreateDriverRequest(BaseModel):
    """Request body for registering a driver."""

    id: uuid.UUID | None = None
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    phone: str | None = Field(default=None, max_length=50)


class UpdateDriverRequest(BaseModel):
    """Request body for updating a driver. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None


class DriverResponse(BaseModel):
    """Response schema for a driver."""

    id: uuid.UUID
    name: str
    email: str
    phone: str | None
    is_active: bool
    created_at: datetime


class DriverListResponse(BaseModel):
    """List of drivers."""

    items: list[DriverResponse]
    total: int
