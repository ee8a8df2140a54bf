from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from ..holidays.working_calendar import CalendarService, WorkingCalendar
from .model import MaterializeResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceMaterializer:
    """Writes synthetic attendance rows (leave, holiday) for working days.

    Keeps the (employee, date) uniqueness: every write is an upsert, so the
    latest authorized status wins and re-running is idempotent.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        calendar: CalendarService,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calendar = calendar

    def materialize_range(
        self,
        *,
        employee_id: int,
        start: date,
        end: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
        calendar: Optional[WorkingCalendar] = None,
    ) -> int:
        if start > end:
            return 0

        snapshot = calendar or self._calendar.snapshot(start, end)
        days = snapshot.working_days(start, end)
        if not days:
            return 0

        self._attendance.upsert_status(
            employee_ids=[int(employee_id)],
            work_dates=days,
            status=status,
            notes=note,
        )
        logger.info(
            "Materialized %d %s attendance day(s) for employee %s (%s..%s)",
            len(days), status.value, employee_id, start, end,
        )
        return len(days)

    def _conflicts(self, work_date: date, status: AttendanceStatus):
        conflicts = [r for r in self._attendance.list_on_date(work_date=work_date) if r.status != status]
        return conflicts, tuple(sorted({r.status.value for r in conflicts}))

    def check_conflicts(self, *, work_date: date, status: AttendanceStatus) -> MaterializeResult:
        """Dry run: report records on the date carrying a different status."""

        conflicts, statuses = self._conflicts(work_date, status)
        return MaterializeResult(
            needs_confirmation=bool(conflicts),
            existing_count=len(conflicts),
            existing_statuses=statuses,
        )

    def materialize_for_all_active_employees(
        self,
        *,
        work_date: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
        force_overwrite: bool = False,
    ) -> MaterializeResult:
        conflicts, statuses = self._conflicts(work_date, status)

        if conflicts and not force_overwrite:
            logger.info(
                "Write of %s attendance on %s needs confirmation (%d conflicting record(s): %s)",
                status.value, work_date, len(conflicts), ", ".join(statuses),
            )
            return MaterializeResult(
                needs_confirmation=True,
                existing_count=len(conflicts),
                existing_statuses=statuses,
            )

        employee_ids = list(self._employees.list_active_ids())
        if employee_ids:
            self._attendance.upsert_status(
                employee_ids=employee_ids,
                work_dates=[work_date],
                status=status,
                notes=note,
            )

        active = set(employee_ids)
        overwritten = sum(1 for r in conflicts if r.employee_id in active)
        logger.info(
            "Materialized %s attendance on %s for %d active employee(s), overwrote %d",
            status.value, work_date, len(employee_ids), overwritten,
        )
        return MaterializeResult(
            needs_confirmation=False,
            existing_count=len(conflicts),
            existing_statuses=statuses,
            written_count=len(employee_ids),
            overwritten_count=overwritten,
        )

    def remove_range(
        self,
        *,
        work_date: date,
        status: AttendanceStatus,
        employee_id: Optional[int] = None,
    ) -> int:
        removed = self._attendance.delete_by_status(work_date=work_date, status=status, employee_id=employee_id)
        logger.info("Removed %d %s attendance record(s) on %s", removed, status.value, work_date)
        return removed
