# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header, Path, status

from driver_log.exceptions import AppError
from driver_log.schemas.auth import AuthContext
from driver_log.services.clock import Clock, get_clock


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default="driver"),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, role=x_role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_admin(
    auth: AuthDep,
) -> AuthContext:
    """Require admin role for the request."""
    if not auth.is_admin:
        raise AppError("Admin access required", status_code=status.HTTP_403_FORBIDDEN)
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]


async def validate_driver_scope(
    driver_id: uuid.UUID = Path(),
    auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Drivers may only act on their own records; admins on anyone's."""
    if not auth.is_admin and driver_id != auth.user_id:
        raise AppError("Driver ID mismatch", status_code=status.HTTP_403_FORBIDDEN)
    return auth


ClockDep = Annotated[Clock, Depends(get_clock)]
