"""Dig-readiness aggregation over utility responses.

The verdict is a projection of the current response set and is recomputed
on every call. Precedence: no responses is pending, any conflict is a
conflict, all clearances is ready, anything else is pending.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from digsafe.compliance.models import ReadinessReport, UtilityResponse
from digsafe.core.types import ReadinessVerdict, ResponseStatus


def aggregate_readiness(responses: Iterable[UtilityResponse]) -> ReadinessVerdict:
    """Fold a response set into a single verdict. Order does not matter."""
    statuses = [r.status for r in responses]
    if not statuses:
        return ReadinessVerdict.PENDING
    if ResponseStatus.CONFLICT in statuses:
        return ReadinessVerdict.CONFLICT
    if all(s.is_clearance for s in statuses):
        return ReadinessVerdict.READY
    return ReadinessVerdict.PENDING


def build_readiness_report(responses: Iterable[UtilityResponse]) -> ReadinessReport:
    """Verdict plus which utilities are blocking or still outstanding."""
    responses = list(responses)
    verdict = aggregate_readiness(responses)
    counts = Counter(r.status for r in responses)

    return ReadinessReport(
        verdict=verdict,
        banner=verdict.banner,
        total_responses=len(responses),
        counts={status: counts.get(status, 0) for status in ResponseStatus},
        conflicting_utilities=_utilities_with(responses, ResponseStatus.CONFLICT),
        outstanding_utilities=_utilities_with(responses, ResponseStatus.NOT_RESPONDED),
    )


def _utilities_with(responses: list[UtilityResponse], status: ResponseStatus) -> list[str]:
    # Sorted and de-duplicated so the report is independent of recording order
    return sorted({r.utility_name for r in responses if r.status == status})


class ReadinessAggregator:
    """Stateless wrapper for callers that inject an aggregator."""

    def aggregate(self, responses: Iterable[UtilityResponse]) -> ReadinessVerdict:
        return aggregate_readiness(responses)

    def report(self, responses: Iterable[UtilityResponse]) -> ReadinessReport:
        return build_readiness_report(responses)
