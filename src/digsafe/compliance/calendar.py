"""Business-day calendar with injectable, configuration-driven holidays.

Holiday sets are loaded from YAML (one list of dated, named entries per
jurisdiction) and injected into :class:`BusinessCalendar`. The calendar
never mutates them, so one instance can be shared by any number of
concurrent deadline computations.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any, Iterable, Protocol, runtime_checkable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from digsafe.compliance.models import Holiday
from digsafe.core.errors import HolidayConfigError

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "holidays.yml"

# date.weekday(): Monday=0 ... Friday=4, Saturday=5, Sunday=6
_FIRST_WEEKEND_DAY = 5


@runtime_checkable
class HolidayCalendar(Protocol):
    """Anything that can say whether a calendar date is a holiday."""

    def is_holiday(self, day: date) -> bool: ...


class FixedHolidayCalendar:
    """An immutable, year-scoped set of holiday dates."""

    def __init__(self, holidays: Iterable[Holiday | date] = (), jurisdiction: str = "") -> None:
        entries: dict[date, Holiday] = {}
        for item in holidays:
            holiday = item if isinstance(item, Holiday) else Holiday(day=item)
            entries[holiday.day] = holiday
        self._entries = dict(sorted(entries.items()))
        self._dates = frozenset(self._entries)
        self._years = frozenset(d.year for d in self._dates)
        self.jurisdiction = jurisdiction

    def is_holiday(self, day: date) -> bool:
        return day in self._dates

    def covers(self, year: int) -> bool:
        """Whether the configuration lists any holidays for ``year``."""
        return year in self._years

    @property
    def dates(self) -> frozenset[date]:
        return self._dates

    @property
    def years(self) -> list[int]:
        return sorted(self._years)

    def holidays(self, year: int | None = None) -> list[Holiday]:
        return [h for d, h in self._entries.items() if year is None or d.year == year]

    def __len__(self) -> int:
        return len(self._dates)

    def __contains__(self, day: object) -> bool:
        return day in self._dates

    def __repr__(self) -> str:
        return f"FixedHolidayCalendar(jurisdiction={self.jurisdiction!r}, holidays={len(self)})"


class BusinessCalendar:
    """Decides whether a date counts toward a statutory waiting period.

    A business day is any Monday-Friday that is not in the injected
    holiday set. Without a holiday set only weekends are excluded.

    Timestamps are reduced to calendar dates before lookup. Aware
    datetimes are first converted to the canonical ``timezone``; naive
    datetimes are taken to already be in it.
    """

    def __init__(
        self,
        holidays: HolidayCalendar | None = None,
        timezone: tzinfo | str | None = None,
    ) -> None:
        self._holidays = holidays
        self._tz = _resolve_timezone(timezone)

    @property
    def holidays(self) -> HolidayCalendar | None:
        return self._holidays

    @property
    def timezone(self) -> tzinfo | None:
        return self._tz

    def localize(self, value: datetime) -> datetime:
        """Express an aware timestamp in the canonical zone; naive values pass through."""
        if value.tzinfo is None or self._tz is None:
            return value
        return value.astimezone(self._tz)

    def to_date(self, value: date | datetime) -> date:
        if isinstance(value, datetime):
            return self.localize(value).date()
        return value

    def is_weekend(self, value: date | datetime) -> bool:
        return self.to_date(value).weekday() >= _FIRST_WEEKEND_DAY

    def is_holiday(self, value: date | datetime) -> bool:
        if self._holidays is None:
            return False
        return self._holidays.is_holiday(self.to_date(value))

    def is_business_day(self, value: date | datetime) -> bool:
        day = self.to_date(value)
        return not self.is_weekend(day) and not self.is_holiday(day)

    def covers(self, value: date | datetime) -> bool:
        """Whether holiday data exists for the year of ``value``.

        Calendars that cannot report coverage are assumed to cover every year.
        """
        covers = getattr(self._holidays, "covers", None)
        if covers is None:
            return True
        return covers(self.to_date(value).year)

    def __repr__(self) -> str:
        return f"BusinessCalendar(holidays={self._holidays!r}, timezone={self._tz!r})"


class HolidayRegistry:
    """Loads per-jurisdiction holiday calendars from YAML."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        self._config_path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        self._calendars: dict[str, FixedHolidayCalendar] = {}
        self._names: dict[str, str] = {}
        self._default: str | None = None
        self._load_config()

    def _load_config(self) -> None:
        with open(self._config_path) as fh:
            raw = yaml.safe_load(fh) or {}

        jurisdictions = raw.get("jurisdictions") or {}
        if not isinstance(jurisdictions, dict):
            raise HolidayConfigError(
                f"'jurisdictions' in {self._config_path} must be a mapping"
            )

        for code, data in jurisdictions.items():
            code = str(code)
            data = data or {}
            holidays = [
                _parse_holiday(entry, code) for entry in data.get("holidays") or []
            ]
            self._calendars[code] = FixedHolidayCalendar(holidays, jurisdiction=code)
            self._names[code] = str(data.get("name", code))

        default = raw.get("default_jurisdiction")
        if default is not None and str(default) not in self._calendars:
            raise HolidayConfigError(
                f"Default jurisdiction {default!r} is not configured. "
                f"Available: {list(self._calendars.keys())}"
            )
        self._default = str(default) if default is not None else None

        logger.info(
            "Loaded holiday calendars for %d jurisdiction(s) from %s",
            len(self._calendars),
            self._config_path,
        )

    @property
    def default_jurisdiction(self) -> str | None:
        return self._default

    def jurisdictions(self) -> dict[str, str]:
        """Map of jurisdiction code to display name."""
        return dict(self._names)

    def calendar_for(self, jurisdiction: str | None = None) -> FixedHolidayCalendar:
        code = jurisdiction or self._default
        if code is None or code not in self._calendars:
            raise HolidayConfigError(
                f"No holiday calendar for jurisdiction {code!r}. "
                f"Available: {list(self._calendars.keys())}"
            )
        return self._calendars[code]

    def business_calendar(
        self,
        jurisdiction: str | None = None,
        timezone: tzinfo | str | None = None,
    ) -> BusinessCalendar:
        return BusinessCalendar(self.calendar_for(jurisdiction), timezone=timezone)


def _parse_holiday(entry: Any, jurisdiction: str) -> Holiday:
    # Entries are either bare dates or {date, name} mappings
    if isinstance(entry, dict):
        raw_date, name = entry.get("date"), str(entry.get("name", ""))
    else:
        raw_date, name = entry, ""

    if isinstance(raw_date, datetime):
        raw_date = raw_date.date()
    if isinstance(raw_date, date):
        return Holiday(day=raw_date, name=name)

    try:
        return Holiday(day=date.fromisoformat(str(raw_date)), name=name)
    except ValueError:
        raise HolidayConfigError(
            f"Invalid holiday date {raw_date!r} for jurisdiction {jurisdiction!r}"
        ) from None


def _resolve_timezone(value: tzinfo | str | None) -> tzinfo | None:
    if value is None or isinstance(value, tzinfo):
        return value
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise HolidayConfigError(f"Unknown time zone {value!r}") from None
