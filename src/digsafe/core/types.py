"""Core type definitions shared across all DigSafe modules."""

from __future__ import annotations

from enum import StrEnum


class TicketType(StrEnum):
    """Kinds of excavation notice filed with the one-call center."""

    NORMAL = "normal"
    MEET = "meet"


class ResponseStatus(StrEnum):
    """Status a notified utility reports for its buried facilities."""

    MARKED = "marked"
    CLEAR = "clear"
    NO_CONFLICT = "no_conflict"
    CONFLICT = "conflict"
    NOT_RESPONDED = "not_responded"

    @classmethod
    def parse(cls, value: str | ResponseStatus) -> ResponseStatus:
        """Accept enum values as well as the labels used by the response UI.

        ``"No Conflict"``, ``"not-responded"`` and ``"MARKED"`` all resolve.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown response status {value!r}. "
                f"Available: {[s.value for s in cls]}"
            ) from None

    @property
    def is_clearance(self) -> bool:
        """Whether this status clears the utility for digging."""
        return self in _CLEARANCE_STATUSES


_CLEARANCE_STATUSES = frozenset(
    {ResponseStatus.MARKED, ResponseStatus.CLEAR, ResponseStatus.NO_CONFLICT}
)


class ReadinessVerdict(StrEnum):
    """Aggregate dig-readiness derived from all utility responses."""

    PENDING = "pending"
    READY = "ready"
    CONFLICT = "conflict"

    @property
    def banner(self) -> str:
        """Label shown by readiness banners for this verdict."""
        return _BANNERS[self]


_BANNERS: dict[ReadinessVerdict, str] = {
    ReadinessVerdict.READY: "Ready to Dig",
    ReadinessVerdict.CONFLICT: "Do Not Dig — Conflict",
    ReadinessVerdict.PENDING: "Pending Utility Responses",
}


class ExpirationState(StrEnum):
    """Where a ticket sits relative to its expiration time."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
