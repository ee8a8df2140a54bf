from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Callable, ContextManager, Optional, Sequence

from ..attendance.materializer import AttendanceMaterializer
from ..common.validators import optional_text, require_non_empty, require_present
from ..core.constants import HOLIDAY_NOTE_PREFIX
from ..core.enums import AttendanceStatus, HolidayCategory
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday, HolidayResult
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


def _parse_category(value: HolidayCategory | str) -> HolidayCategory:
    try:
        return HolidayCategory(value)
    except ValueError:
        raise ValidationError("Kategori hari libur tidak valid")


class HolidayService:
    """Holiday master with its attendance side effects.

    Adding a holiday writes ``holiday`` attendance for every active
    employee; deleting it retracts exactly those rows.
    """

    def __init__(
        self,
        holidays: HolidayRepository,
        materializer: AttendanceMaterializer,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._holidays = holidays
        self._materializer = materializer
        self._transaction = transaction or nullcontext

    def list_holidays(self, *, year: Optional[int] = None) -> Sequence[Holiday]:
        return self._holidays.list_all(year=year)

    def add_holiday(
        self,
        *,
        holiday_date: Optional[date],
        name: str,
        category: HolidayCategory | str,
        is_paid: bool = True,
        description: Optional[str] = None,
        force_overwrite: bool = False,
    ) -> HolidayResult:
        require_present(holiday_date, "Tanggal")
        name = require_non_empty(name, "Nama hari libur")
        category = _parse_category(category)

        if self._holidays.get_by_date(holiday_date):
            raise ValidationError("Sudah ada hari libur pada tanggal tersebut")

        with self._transaction():
            result = self._materializer.materialize_for_all_active_employees(
                work_date=holiday_date,
                status=AttendanceStatus.HOLIDAY,
                note=f"{HOLIDAY_NOTE_PREFIX}: {name}",
                force_overwrite=force_overwrite,
            )
            if result.needs_confirmation:
                return HolidayResult(
                    holiday=None,
                    needs_confirmation=True,
                    existing_count=result.existing_count,
                    existing_statuses=result.existing_statuses,
                )

            holiday_id = self._holidays.create(
                holiday_date=holiday_date,
                name=name,
                category=category,
                is_paid=bool(is_paid),
                description=optional_text(description),
            )

        logger.info(
            "Holiday %s (%s) added on %s, %d attendance row(s) written",
            holiday_id, name, holiday_date, result.written_count,
        )
        return HolidayResult(
            holiday=self._holidays.get_by_id(holiday_id),
            existing_count=result.existing_count,
            existing_statuses=result.existing_statuses,
            overwritten_count=result.overwritten_count,
        )

    def update_holiday(
        self,
        *,
        holiday_id: int,
        name: str,
        category: HolidayCategory | str,
        is_paid: bool = True,
        description: Optional[str] = None,
    ) -> Holiday:
        if not self._holidays.get_by_id(int(holiday_id)):
            raise NotFoundError("Hari libur tidak ditemukan")

        self._holidays.update(
            holiday_id=int(holiday_id),
            name=require_non_empty(name, "Nama hari libur"),
            category=_parse_category(category),
            is_paid=bool(is_paid),
            description=optional_text(description),
        )
        return self._holidays.get_by_id(int(holiday_id))

    def delete_holiday(self, *, holiday_id: int) -> int:
        holiday = self._holidays.get_by_id(int(holiday_id))
        if not holiday:
            raise NotFoundError("Hari libur tidak ditemukan")

        with self._transaction():
            self._holidays.delete(holiday_id=holiday.holiday_id)
            removed = self._materializer.remove_range(
                work_date=holiday.holiday_date,
                status=AttendanceStatus.HOLIDAY,
            )

        logger.info("Holiday %s on %s deleted, %d attendance row(s) removed", holiday.holiday_id, holiday.holiday_date, removed)
        return removed
