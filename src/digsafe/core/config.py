"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class CalendarConfig(BaseSettings):
    """Holiday calendar configuration."""

    model_config = {"env_prefix": "DIGSAFE_CALENDAR_"}

    holidays_path: str | None = None
    jurisdiction: str = "MN"
    # Canonical zone for day-granularity comparisons of aware timestamps
    timezone: str = "America/Chicago"


class ExpirationConfig(BaseSettings):
    """Expiration sweep configuration."""

    model_config = {"env_prefix": "DIGSAFE_EXPIRATION_"}

    warning_days: int = 3


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "DIGSAFE_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    expiration: ExpirationConfig = Field(default_factory=ExpirationConfig)
