"""Deterministic statutory deadline arithmetic for dig tickets.

Three rules, each a pure function of one timestamp and a business calendar:

* Locate period: begins 00:01 the day after filing and runs for two full
  business days; locating is complete at 00:01 the day after the second
  business day.
* Meet to excavation: excavation may begin two business days after the
  meet, on the second business day at the meet's own time of day.
* Ticket lifetime: 14 calendar days from the start time, no exclusions.

The first two anchor differently on purpose and must stay separate.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from digsafe.compliance.calendar import BusinessCalendar

LOCATE_PERIOD_BUSINESS_DAYS = 2
MEET_PERIOD_BUSINESS_DAYS = 2
TICKET_LIFETIME = timedelta(days=14)

_LOCATE_READY_TIME = time(0, 1)
_ONE_DAY = timedelta(days=1)


def calculate_locate_ready_at(filed_at: datetime, calendar: BusinessCalendar) -> datetime:
    """When the locate period for a ticket filed at ``filed_at`` is complete.

    Filed Friday: Saturday and Sunday are skipped, Monday and Tuesday are
    counted, and the result is Wednesday 00:01.
    """
    local = calendar.localize(filed_at)
    second = _nth_business_day_after(local.date(), LOCATE_PERIOD_BUSINESS_DAYS, calendar)
    return datetime.combine(second + _ONE_DAY, _LOCATE_READY_TIME, tzinfo=local.tzinfo)


def calculate_excavation_earliest_from_meet(
    meet_held_at: datetime, calendar: BusinessCalendar
) -> datetime:
    """Earliest excavation time after a meet, keeping the meet's time of day.

    Meet Friday 14:00 gives Tuesday 14:00.
    """
    local = calendar.localize(meet_held_at)
    second = _nth_business_day_after(local.date(), MEET_PERIOD_BUSINESS_DAYS, calendar)
    return local.replace(year=second.year, month=second.month, day=second.day)


def calculate_ticket_expiration(start_time: datetime) -> datetime:
    """Ticket expiration: flat calendar days, no business-day exclusions."""
    return start_time + TICKET_LIFETIME


def days_until_expiration(expires_at: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``expires_at``, truncated toward zero."""
    delta = expires_at - now
    days = abs(delta) // _ONE_DAY
    return days if delta >= timedelta(0) else -days


def _nth_business_day_after(start: date, count: int, calendar: BusinessCalendar) -> date:
    """Return the ``count``-th business day strictly after ``start``."""
    current = start
    counted = 0
    while counted < count:
        current += _ONE_DAY
        if calendar.is_business_day(current):
            counted += 1
    return current


class DeadlineCalculator:
    """Binds the deadline rules to one business calendar."""

    def __init__(self, calendar: BusinessCalendar | None = None) -> None:
        self._calendar = calendar if calendar is not None else BusinessCalendar()

    @property
    def calendar(self) -> BusinessCalendar:
        return self._calendar

    def locate_ready_at(self, filed_at: datetime) -> datetime:
        return calculate_locate_ready_at(filed_at, self._calendar)

    def excavation_earliest_from_meet(self, meet_held_at: datetime) -> datetime:
        return calculate_excavation_earliest_from_meet(meet_held_at, self._calendar)

    def ticket_expiration(self, start_time: datetime) -> datetime:
        return calculate_ticket_expiration(start_time)
