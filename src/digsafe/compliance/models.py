"""Compliance data models for ticket windows, utility responses, and derived deadlines."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from digsafe.core.types import ExpirationState, ReadinessVerdict, ResponseStatus, TicketType


class Holiday(BaseModel):
    """A single configured non-business day."""

    model_config = {"frozen": True}

    day: date
    name: str = ""


class UtilityResponse(BaseModel):
    """A response recorded for one notified utility. Corrections are new responses."""

    model_config = {"frozen": True}

    utility_name: str
    status: ResponseStatus = ResponseStatus.NOT_RESPONDED
    response_date: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> ResponseStatus:
        return ResponseStatus.parse(value)


class TicketWindow(BaseModel):
    """Timestamps of a dig ticket that feed the statutory clocks.

    All timestamps must be timezone-aware or all naive; a mix cannot be
    ordered against each other.
    """

    model_config = {"frozen": True}

    ticket_id: str | None = None
    ticket_number: str | None = None
    ticket_type: TicketType = TicketType.NORMAL
    filed_at: datetime
    work_to_begin_at: datetime | None = None
    meet_scheduled_for: datetime | None = None
    meet_held_at: datetime | None = None

    @model_validator(mode="after")
    def _check_timestamp_awareness(self) -> TicketWindow:
        check_consistent_awareness(
            filed_at=self.filed_at,
            work_to_begin_at=self.work_to_begin_at,
            meet_scheduled_for=self.meet_scheduled_for,
            meet_held_at=self.meet_held_at,
        )
        return self

    @property
    def is_meet_ticket(self) -> bool:
        return self.ticket_type == TicketType.MEET or self.meet_held_at is not None

    @property
    def expiration_start(self) -> datetime:
        """Expiration runs from the one-call start time, falling back to filing time."""
        return self.work_to_begin_at or self.filed_at


class DerivedTimestamps(BaseModel):
    """Legal timestamps computed from a ticket window. Never authoritative state."""

    ticket_id: str | None = None
    locate_ready_at: datetime
    excavation_earliest_at: datetime | None = None
    expires_at: datetime
    legal_start_at: datetime | None = None


class ReadinessReport(BaseModel):
    """Readiness verdict with the per-utility breakdown behind it."""

    verdict: ReadinessVerdict
    banner: str
    total_responses: int = 0
    counts: dict[ResponseStatus, int] = Field(default_factory=dict)
    conflicting_utilities: list[str] = Field(default_factory=list)
    outstanding_utilities: list[str] = Field(default_factory=list)


class ExpirationNotice(BaseModel):
    """Result of checking one ticket during an expiration sweep."""

    ticket_id: str | None = None
    ticket_number: str | None = None
    expires_at: datetime
    days_until: int
    state: ExpirationState


def check_consistent_awareness(**timestamps: datetime | None) -> None:
    """Raise ``ValueError`` unless the given timestamps are all aware or all naive."""
    present = {name: value for name, value in timestamps.items() if value is not None}
    aware = sorted(name for name, value in present.items() if value.tzinfo is not None)
    naive = sorted(name for name, value in present.items() if value.tzinfo is None)
    if aware and naive:
        raise ValueError(
            f"Timestamps must be all timezone-aware or all naive; "
            f"aware: {aware}, naive: {naive}"
        )
