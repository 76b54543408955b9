from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Driver Log"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://driver_log:driver_log@db:5432/driver_log"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Every shift timestamp is wall-clock time in this zone.
    timezone: str = "Asia/Kolkata"

    # Fallback payroll configuration when no version has been stored yet.
    base_salary: Decimal = Decimal("27000")
    overtime_rate_per_hour: Decimal = Decimal("100")
    fuel_allowance_per_day: Decimal = Decimal("33.30")
    annual_leave_allowance: int = 12


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
