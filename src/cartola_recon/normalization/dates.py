"""
Date parsing and business-day arithmetic.

Spreadsheet cells arrive as datetimes, ISO strings or `DD/MM/YYYY` text.
Everything here degrades to `None` or a `DateSentinel` instead of raising,
so a row with a bad date still reaches the matcher.
"""

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Iterator, Optional, Union
import logging

import pandas as pd

from ..models.records import DateSentinel, RecordDate

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%d/%m/%Y"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a cell value into a date.

    Args:
        value: datetime, date, pandas Timestamp or text

    Returns:
        The date, or None when the value is not a recognizable date
    """
    if isinstance(value, DateSentinel) or _is_missing(value):
        return None

    # datetime (and pandas Timestamp) must be checked before date
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    parts = text.split("/")
    if len(parts) == 3:
        day, month, year = parts
        try:
            # Drop a trailing time component ("01/03/2024 10:15")
            year_number = int(year.split()[0])
            # Two-digit years are ambiguous
            if year_number < 100:
                return None
            return date(year_number, int(month), int(day))
        except (ValueError, IndexError):
            return None

    return None


def format_date(value: Union[RecordDate, None]) -> str:
    """Render a date as dd/mm/YYYY, a sentinel as its label, None as ''."""
    if isinstance(value, DateSentinel):
        return value.value
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(DISPLAY_DATE_FORMAT)
    return ""


@dataclass(frozen=True)
class BusinessDayCalendar:
    """Ascending, duplicate-free set of settlement dates."""

    days: tuple[date, ...] = ()

    @classmethod
    def from_values(cls, values: Iterable[Any]) -> "BusinessDayCalendar":
        """
        Build a calendar from raw cell values, dropping unparseable ones.

        Args:
            values: Unordered date-like values

        Returns:
            Calendar with the valid dates sorted ascending
        """
        parsed: set[date] = set()
        dropped = 0
        for value in values:
            day = parse_date(value)
            if day is None:
                dropped += 1
                continue
            parsed.add(day)

        if dropped:
            logger.debug(f"Dropped {dropped} invalid business-day entries")

        return cls(days=tuple(sorted(parsed)))

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[date]:
        return iter(self.days)

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        if isinstance(day, datetime):
            day = day.date()
        index = bisect_right(self.days, day)
        return index > 0 and self.days[index - 1] == day

    @property
    def first(self) -> Optional[date]:
        return self.days[0] if self.days else None

    @property
    def last(self) -> Optional[date]:
        return self.days[-1] if self.days else None

    def next_after(self, day: date) -> RecordDate:
        """First business day strictly after `day`, or UNAVAILABLE."""
        index = bisect_right(self.days, day)
        if index < len(self.days):
            return self.days[index]
        return DateSentinel.UNAVAILABLE


def next_business_day(
    day: Union[RecordDate, None],
    calendar: Union[BusinessDayCalendar, Iterable[date]],
) -> RecordDate:
    """
    Resolve the business day following `day`.

    Args:
        day: Date to start from; sentinels and None count as invalid
        calendar: BusinessDayCalendar or any iterable of dates

    Returns:
        The next calendar date, DateSentinel.INVALID for an invalid input
        date, or DateSentinel.UNAVAILABLE past the end of the calendar
    """
    if not isinstance(day, date):
        return DateSentinel.INVALID
    if isinstance(day, datetime):
        day = day.date()

    if not isinstance(calendar, BusinessDayCalendar):
        calendar = BusinessDayCalendar.from_values(calendar)
    return calendar.next_after(day)
