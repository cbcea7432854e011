"""Compliance API router for ticket deadlines, readiness, and expiration sweeps."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, model_validator

from digsafe.compliance.calendar import BusinessCalendar, HolidayRegistry
from digsafe.compliance.models import TicketWindow, UtilityResponse, check_consistent_awareness
from digsafe.compliance.service import ComplianceClockService
from digsafe.core.errors import HolidayConfigError, InvalidTicketStateError


router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response models
# ---------------------------------------------------------------------------


class TicketDeadlineRequest(TicketWindow):
    """Ticket window, optionally evaluated against another jurisdiction's holidays."""

    jurisdiction: str | None = None


class ReadinessRequest(BaseModel):
    """Request body for readiness aggregation."""

    responses: list[UtilityResponse] = Field(default_factory=list)


class ExpirationSweepRequest(BaseModel):
    """Request body for an expiration sweep."""

    now: datetime
    tickets: list[TicketWindow] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_timestamp_awareness(self) -> ExpirationSweepRequest:
        # Each ticket is already self-consistent; compare one of its timestamps to now
        for ticket in self.tickets:
            check_consistent_awareness(now=self.now, filed_at=ticket.filed_at)
        return self


# ---------------------------------------------------------------------------
# Helper to get services from app state
# ---------------------------------------------------------------------------


def _get_clock_service(request: Request) -> ComplianceClockService:
    service = getattr(request.app.state, "clock_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Compliance clock not available")
    return service


def _get_holiday_registry(request: Request) -> HolidayRegistry:
    registry = getattr(request.app.state, "holiday_registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Holiday registry not available")
    return registry


def _calendar_for(request: Request, jurisdiction: str | None) -> BusinessCalendar | None:
    if jurisdiction is None:
        return None
    service = _get_clock_service(request)
    registry = _get_holiday_registry(request)
    try:
        return registry.business_calendar(jurisdiction, timezone=service.calendar.timezone)
    except HolidayConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/api/compliance/deadlines")
async def api_compute_deadlines(
    body: TicketDeadlineRequest, request: Request
) -> dict[str, Any]:
    """Compute locate-ready, meet-to-excavation, and expiration timestamps."""
    service = _get_clock_service(request)
    calendar = _calendar_for(request, body.jurisdiction)
    ticket = TicketWindow.model_validate(body.model_dump(exclude={"jurisdiction"}))
    deadlines = service.compute_deadlines(ticket, calendar)
    return deadlines.model_dump(mode="json")


@router.post("/api/compliance/excavation-earliest")
async def api_excavation_earliest(
    body: TicketDeadlineRequest, request: Request
) -> dict[str, Any]:
    """Earliest excavation time for a meet ticket whose meet has been held."""
    service = _get_clock_service(request)
    calendar = _calendar_for(request, body.jurisdiction)
    try:
        earliest = service.excavation_earliest_from_meet(body, calendar)
    except InvalidTicketStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {
        "ticket_id": body.ticket_id,
        "excavation_earliest_at": earliest.isoformat(),
    }


@router.post("/api/compliance/readiness")
async def api_compute_readiness(
    body: ReadinessRequest, request: Request
) -> dict[str, Any]:
    """Aggregate utility responses into a dig-readiness verdict."""
    service = _get_clock_service(request)
    report = service.readiness_report(body.responses)
    return report.model_dump(mode="json")


@router.post("/api/compliance/expirations")
async def api_sweep_expirations(
    body: ExpirationSweepRequest, request: Request
) -> dict[str, Any]:
    """Classify tickets as active, expiring soon, or expired at ``now``."""
    service = _get_clock_service(request)
    notices = service.sweep_expirations(body.tickets, body.now)

    return {
        "processed": len(notices),
        "notices": [notice.model_dump(mode="json") for notice in notices],
    }


@router.get("/api/compliance/holidays")
async def api_list_holidays(
    request: Request,
    jurisdiction: str | None = None,
    year: int | None = None,
) -> dict[str, Any]:
    """List configured holidays for a jurisdiction (default jurisdiction if omitted)."""
    registry = _get_holiday_registry(request)
    try:
        calendar = registry.calendar_for(jurisdiction)
    except HolidayConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "jurisdiction": calendar.jurisdiction,
        "name": registry.jurisdictions().get(calendar.jurisdiction, calendar.jurisdiction),
        "years": calendar.years,
        "holidays": [h.model_dump(mode="json") for h in calendar.holidays(year)],
    }
