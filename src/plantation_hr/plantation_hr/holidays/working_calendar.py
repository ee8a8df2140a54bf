from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional

from ..common.datetime_utils import iter_days
from ..core.constants import DEFAULT_REST_WEEKDAY
from .repository import HolidayRepository


@dataclass(frozen=True)
class WorkingCalendar:
    """Immutable snapshot of the non-working days.

    A working day is neither the weekly rest day nor a recorded holiday.
    Keep one snapshot for a whole computation so that concurrent holiday
    edits cannot change the answer halfway through a range.
    """

    holiday_dates: FrozenSet[date] = frozenset()
    rest_weekday: int = DEFAULT_REST_WEEKDAY

    def is_non_working_day(self, day: date) -> bool:
        return day.weekday() == self.rest_weekday or day in self.holiday_dates

    def working_days(self, start: date, end: date) -> list[date]:
        return [d for d in iter_days(start, end) if not self.is_non_working_day(d)]

    def count_working_days(self, start: date, end: date) -> int:
        return len(self.working_days(start, end))


class CalendarService:
    def __init__(self, holidays: HolidayRepository, *, rest_weekday: int = DEFAULT_REST_WEEKDAY):
        if not 0 <= int(rest_weekday) <= 6:
            raise ValueError(f"rest_weekday must be 0..6, got {rest_weekday!r}")
        self._holidays = holidays
        self._rest_weekday = int(rest_weekday)

    def snapshot(self, start: Optional[date] = None, end: Optional[date] = None) -> WorkingCalendar:
        dates = self._holidays.list_dates(start=start, end=end)
        return WorkingCalendar(holiday_dates=frozenset(dates), rest_weekday=self._rest_weekday)

    def is_non_working_day(self, day: date) -> bool:
        return self.snapshot(day, day).is_non_working_day(day)

    def count_working_days(self, start: date, end: date) -> int:
        if start > end:
            return 0
        return self.snapshot(start, end).count_working_days(start, end)
