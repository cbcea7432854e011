"""Compliance engine for DigSafe.

Business-day calendar, statutory deadline rules, and dig-readiness
aggregation, composed by :class:`ComplianceClockService`.
"""

from digsafe.compliance.calendar import (
    BusinessCalendar,
    FixedHolidayCalendar,
    HolidayCalendar,
    HolidayRegistry,
)
from digsafe.compliance.deadlines import (
    DeadlineCalculator,
    calculate_excavation_earliest_from_meet,
    calculate_locate_ready_at,
    calculate_ticket_expiration,
)
from digsafe.compliance.readiness import ReadinessAggregator, aggregate_readiness
from digsafe.compliance.service import ComplianceClockService

__all__ = [
    "BusinessCalendar",
    "ComplianceClockService",
    "DeadlineCalculator",
    "FixedHolidayCalendar",
    "HolidayCalendar",
    "HolidayRegistry",
    "ReadinessAggregator",
    "aggregate_readiness",
    "calculate_excavation_earliest_from_meet",
    "calculate_locate_ready_at",
    "calculate_ticket_expiration",
]
