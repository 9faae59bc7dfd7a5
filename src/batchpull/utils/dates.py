"""Calendar helpers: day keys and date ranges."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Iterator

DAY_KEY_FORMAT = "%Y%m%d"


def to_day_key(day: datetime.date) -> str:
    """Format a date as the fixed-width remote directory token (YYYYMMDD)."""
    return day.strftime(DAY_KEY_FORMAT)


def parse_day_key(day_key: str) -> datetime.date:
    """Inverse of to_day_key. Raises ValueError on malformed keys."""
    return datetime.datetime.strptime(day_key, DAY_KEY_FORMAT).date()


def day_key_to_iso(day_key: str) -> str:
    """'20250623' -> '2025-06-23'."""
    return f"{day_key[:4]}-{day_key[4:6]}-{day_key[6:8]}"


def enumerate_days(start: datetime.date, end: datetime.date) -> list[str]:
    """Return one day key per calendar day from start to end (inclusive).

    A reversed range (start > end) yields an empty list rather than an error.
    """
    days = []
    current = start
    while current <= end:
        days.append(to_day_key(current))
        current += datetime.timedelta(days=1)
    return days


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""

    start: datetime.date
    end: datetime.date

    def days(self) -> Iterator[str]:
        """Yield day keys in ascending order. Safe to call repeatedly."""
        yield from enumerate_days(self.start, self.end)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


def previous_week(ref_date: datetime.date | None = None) -> DateRange:
    """Return Monday..Sunday of the calendar week before ref_date's week."""
    if ref_date is None:
        ref_date = datetime.date.today()

    this_monday = ref_date - datetime.timedelta(days=ref_date.weekday())
    last_monday = this_monday - datetime.timedelta(days=7)
    return DateRange(start=last_monday, end=last_monday + datetime.timedelta(days=6))
