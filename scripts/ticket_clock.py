#!/usr/bin/env python3
"""CLI script to print the statutory deadlines for a dig ticket."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure the project source is importable when running the script directly.
_project_root = Path(__file__).resolve().parent.parent
_src = _project_root / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from digsafe.compliance.calendar import HolidayRegistry  # noqa: E402
from digsafe.compliance.models import TicketWindow  # noqa: E402
from digsafe.compliance.service import ComplianceClockService  # noqa: E402
from digsafe.core.config import Settings  # noqa: E402
from digsafe.core.errors import HolidayConfigError  # noqa: E402
from digsafe.core.types import TicketType  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute locate-ready, excavation, and expiration times for a ticket."
    )
    parser.add_argument(
        "filed_at",
        type=datetime.fromisoformat,
        help="Filing time, ISO 8601 (e.g. 2025-06-06T14:00).",
    )
    parser.add_argument(
        "--meet-held-at",
        type=datetime.fromisoformat,
        default=None,
        help="Time the meet was held, ISO 8601. Marks the ticket as a meet ticket.",
    )
    parser.add_argument(
        "--work-to-begin-at",
        type=datetime.fromisoformat,
        default=None,
        help="Start time assigned by the one-call center; expiration runs from here.",
    )
    parser.add_argument(
        "--jurisdiction",
        type=str,
        default=None,
        help="Holiday jurisdiction code (defaults to the configured jurisdiction).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    # Load settings from environment.
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    try:
        registry = HolidayRegistry(config_path=settings.calendar.holidays_path)
        calendar = registry.business_calendar(
            args.jurisdiction or settings.calendar.jurisdiction,
            timezone=settings.calendar.timezone,
        )
    except HolidayConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    try:
        ticket = TicketWindow(
            ticket_type=TicketType.MEET if args.meet_held_at else TicketType.NORMAL,
            filed_at=args.filed_at,
            work_to_begin_at=args.work_to_begin_at,
            meet_held_at=args.meet_held_at,
        )
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    deadlines = ComplianceClockService(calendar, settings.expiration).compute_deadlines(ticket)

    print(f"Filed:                {ticket.filed_at.isoformat()}")
    print(f"Locate ready:         {deadlines.locate_ready_at.isoformat()}")
    if deadlines.excavation_earliest_at is not None:
        print(f"Excavation from meet: {deadlines.excavation_earliest_at.isoformat()}")
    if deadlines.legal_start_at is not None:
        print(f"Legal start:          {deadlines.legal_start_at.isoformat()}")
    print(f"Expires:              {deadlines.expires_at.isoformat()}")


if __name__ == "__main__":
    main()
