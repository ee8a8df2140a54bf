from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayCategory


@dataclass(frozen=True)
class Holiday:
    """Hari libur global (tidak terikat divisi), paling banyak satu per tanggal."""

    holiday_id: int
    holiday_date: date
    name: str
    category: HolidayCategory
    is_paid: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class HolidayResult:
    """Outcome of add_holiday.

    ``needs_confirmation`` is the "stop and ask" answer: nothing was written
    and the caller may resend with ``force_overwrite=True``.
    """

    holiday: Optional[Holiday]
    needs_confirmation: bool = False
    existing_count: int = 0
    existing_statuses: tuple[str, ...] = ()
    overwritten_count: int = 0
