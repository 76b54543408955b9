from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from driver_log.config import Settings

# Dev auth travels in these headers; see driver_log.api.deps.
AUTH_HEADERS = ["X-User-Id", "X-Role"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Allow the driver and admin frontends to call the API from the browser."""
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", *AUTH_HEADERS],
    )
