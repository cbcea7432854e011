"""Compliance clock facade composing the calendar, deadline rules, and readiness."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable

from digsafe.compliance.calendar import BusinessCalendar
from digsafe.compliance.deadlines import (
    calculate_excavation_earliest_from_meet,
    calculate_locate_ready_at,
    calculate_ticket_expiration,
    days_until_expiration,
)
from digsafe.compliance.models import (
    DerivedTimestamps,
    ExpirationNotice,
    ReadinessReport,
    TicketWindow,
    UtilityResponse,
)
from digsafe.compliance.readiness import aggregate_readiness, build_readiness_report
from digsafe.core.config import ExpirationConfig
from digsafe.core.errors import InvalidTicketStateError
from digsafe.core.types import ExpirationState, ReadinessVerdict

logger = logging.getLogger(__name__)


class ComplianceClockService:
    """Computes deadlines and readiness for ticket snapshots.

    Holds no ticket state. The only injected dependency is the default
    business calendar, which callers may override per call (for example
    when a ticket belongs to another jurisdiction).
    """

    def __init__(
        self,
        calendar: BusinessCalendar | None = None,
        expiration: ExpirationConfig | None = None,
    ) -> None:
        self._calendar = calendar if calendar is not None else BusinessCalendar()
        self._warning_window = timedelta(
            days=(expiration or ExpirationConfig()).warning_days
        )

    @property
    def calendar(self) -> BusinessCalendar:
        return self._calendar

    def compute_deadlines(
        self,
        ticket: TicketWindow,
        calendar: BusinessCalendar | None = None,
    ) -> DerivedTimestamps:
        cal = calendar if calendar is not None else self._calendar

        locate_ready_at = calculate_locate_ready_at(ticket.filed_at, cal)
        scanned = [(ticket.filed_at, locate_ready_at)]
        excavation_earliest_at = None
        if ticket.meet_held_at is not None:
            excavation_earliest_at = calculate_excavation_earliest_from_meet(
                ticket.meet_held_at, cal
            )
            scanned.append((ticket.meet_held_at, excavation_earliest_at))
        self._warn_if_uncovered(ticket, cal, scanned)

        if not ticket.is_meet_ticket:
            legal_start_at = locate_ready_at
        elif excavation_earliest_at is None:
            logger.info(
                "Meet ticket %s has no meet recorded; legal start not yet computable",
                ticket.ticket_id,
            )
            legal_start_at = None
        else:
            legal_start_at = max(locate_ready_at, excavation_earliest_at)

        return DerivedTimestamps(
            ticket_id=ticket.ticket_id,
            locate_ready_at=locate_ready_at,
            excavation_earliest_at=excavation_earliest_at,
            expires_at=calculate_ticket_expiration(ticket.expiration_start),
            legal_start_at=legal_start_at,
        )

    def excavation_earliest_from_meet(
        self,
        ticket: TicketWindow,
        calendar: BusinessCalendar | None = None,
    ) -> datetime:
        if ticket.meet_held_at is None:
            raise InvalidTicketStateError("meet_held_at", ticket_id=ticket.ticket_id)
        cal = calendar if calendar is not None else self._calendar
        return calculate_excavation_earliest_from_meet(ticket.meet_held_at, cal)

    def compute_readiness(self, responses: Iterable[UtilityResponse]) -> ReadinessVerdict:
        return aggregate_readiness(responses)

    def readiness_report(self, responses: Iterable[UtilityResponse]) -> ReadinessReport:
        return build_readiness_report(responses)

    def check_expiration(self, ticket: TicketWindow, now: datetime) -> ExpirationNotice:
        expires_at = calculate_ticket_expiration(ticket.expiration_start)
        if now >= expires_at:
            state = ExpirationState.EXPIRED
        elif expires_at - now <= self._warning_window:
            state = ExpirationState.EXPIRING_SOON
        else:
            state = ExpirationState.ACTIVE

        return ExpirationNotice(
            ticket_id=ticket.ticket_id,
            ticket_number=ticket.ticket_number,
            expires_at=expires_at,
            days_until=days_until_expiration(expires_at, now),
            state=state,
        )

    def sweep_expirations(
        self,
        tickets: Iterable[TicketWindow],
        now: datetime,
    ) -> list[ExpirationNotice]:
        """Classify every ticket against ``now``. Nothing is persisted or sent."""
        notices = [self.check_expiration(ticket, now) for ticket in tickets]
        logger.info(
            "Expiration sweep at %s: %d ticket(s), %d expiring soon, %d expired",
            now.isoformat(),
            len(notices),
            sum(1 for n in notices if n.state == ExpirationState.EXPIRING_SOON),
            sum(1 for n in notices if n.state == ExpirationState.EXPIRED),
        )
        return notices

    @staticmethod
    def _warn_if_uncovered(
        ticket: TicketWindow,
        calendar: BusinessCalendar,
        scanned: list[tuple[datetime, datetime]],
    ) -> None:
        # Every year between a scan's start and its result may hold skipped holidays
        years: set[int] = set()
        for start, end in scanned:
            years.update(range(calendar.to_date(start).year, calendar.to_date(end).year + 1))
        for year in sorted(years):
            if not calendar.covers(date(year, 1, 1)):
                logger.warning(
                    "No holidays configured for %d; ticket %s uses weekend-only exclusion",
                    year,
                    ticket.ticket_id,
                )
