from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import HolidayCategory
from .model import Holiday


class HolidayRepository(Protocol):
    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def list_dates(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[date]:
        """Holiday dates only; used to build working-calendar snapshots."""

        raise NotImplementedError

    def list_all(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(
        self,
        *,
        holiday_date: date,
        name: str,
        category: HolidayCategory,
        is_paid: bool,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        holiday_id: int,
        name: str,
        category: HolidayCategory,
        is_paid: bool,
        description: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, *, holiday_id: int) -> bool:
        raise NotImplementedError
