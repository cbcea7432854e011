"""Exceptions raised by the compliance engine.

Both concrete errors subclass ``ValueError`` so HTTP handlers can map them
alongside ordinary validation failures.
"""

from __future__ import annotations


class ComplianceError(Exception):
    """Base class for compliance engine errors."""


class InvalidTicketStateError(ComplianceError, ValueError):
    """A calculation needs a ticket timestamp that has not been recorded yet."""

    def __init__(self, field: str, ticket_id: str | None = None, message: str | None = None) -> None:
        self.field = field
        self.ticket_id = ticket_id
        if message is None:
            subject = f"Ticket {ticket_id!r}" if ticket_id else "Ticket"
            message = f"{subject} has no {field}; the requested deadline cannot be computed yet"
        super().__init__(message)


class HolidayConfigError(ComplianceError, ValueError):
    """Holiday configuration is malformed or names an unknown jurisdiction."""
