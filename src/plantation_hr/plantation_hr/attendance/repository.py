from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_on_date(self, *, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_status(
        self,
        *,
        employee_ids: Sequence[int],
        work_dates: Sequence[date],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        """Upsert one row per (employee, date) pair of the cross product.

        Existing rows for a key are overwritten with the new status/notes and
        their check-in/out data cleared. Returns the number of keys written.
        """

        raise NotImplementedError

    def delete_by_status(
        self,
        *,
        work_date: date,
        status: AttendanceStatus,
        employee_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError
