from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end (both inclusive)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def add_months(value: date, months: int) -> date:
    # Clamp to the last day of the target month (Jan 31 + 1 month -> Feb 28/29).
    month_index = value.month - 1 + int(months)
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
