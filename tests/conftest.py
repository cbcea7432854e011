"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
import yaml

from digsafe.compliance.calendar import BusinessCalendar, FixedHolidayCalendar


INDEPENDENCE_DAY_2025 = date(2025, 7, 4)


@pytest.fixture
def weekend_calendar() -> BusinessCalendar:
    """Calendar that excludes weekends only."""
    return BusinessCalendar()


@pytest.fixture
def holiday_calendar() -> BusinessCalendar:
    """Calendar with 2025-07-04 configured as a holiday."""
    return BusinessCalendar(FixedHolidayCalendar([INDEPENDENCE_DAY_2025], jurisdiction="TEST"))


@pytest.fixture
def holidays_path(tmp_path: Path) -> Path:
    """Write a two-jurisdiction holiday config and return its path."""
    config = {
        "default_jurisdiction": "MN",
        "jurisdictions": {
            "MN": {
                "name": "Minnesota",
                "holidays": [
                    {"date": "2025-07-04", "name": "Independence Day"},
                    {"date": "2025-12-25", "name": "Christmas Day"},
                    {"date": "2026-01-01", "name": "New Year's Day"},
                ],
            },
            "WI": {
                "name": "Wisconsin",
                "holidays": ["2025-06-03"],
            },
        },
    }
    path = tmp_path / "holidays.yml"
    path.write_text(yaml.safe_dump(config))
    return path
