"""FastAPI application for the DigSafe compliance engine.

Exposes deadline, readiness, expiration-sweep, and holiday endpoints plus
a health check. Nothing is persisted; every response is computed from the
request body and the configured holiday calendar.
"""

from __future__ import annotations

from fastapi import FastAPI
from pydantic import BaseModel

from digsafe import __version__
from digsafe.compliance.calendar import HolidayRegistry
from digsafe.compliance.service import ComplianceClockService
from digsafe.core.config import Settings
from digsafe.web.compliance_router import router as compliance_router


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__
    jurisdiction: str | None = None


def create_app(
    settings: Settings | None = None,
    holiday_registry: HolidayRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to environment-based Settings.
        holiday_registry: Optional pre-loaded holiday registry (useful for testing).
    """
    if settings is None:
        settings = Settings()

    if holiday_registry is None:
        holiday_registry = HolidayRegistry(config_path=settings.calendar.holidays_path)

    calendar = holiday_registry.business_calendar(
        settings.calendar.jurisdiction,
        timezone=settings.calendar.timezone,
    )
    clock_service = ComplianceClockService(
        calendar=calendar,
        expiration=settings.expiration,
    )

    app = FastAPI(
        title="DigSafe Compliance Clock",
        version=__version__,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.holiday_registry = holiday_registry
    app.state.clock_service = clock_service

    app.include_router(compliance_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="digsafe-compliance-clock",
            jurisdiction=settings.calendar.jurisdiction,
        )

    return app
