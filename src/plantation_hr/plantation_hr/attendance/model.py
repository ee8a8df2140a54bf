from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Satu baris presensi per (karyawan, tanggal)."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    working_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class MaterializeResult:
    """Outcome of a fan-out write for one date.

    When ``needs_confirmation`` is true nothing was written; the existing
    conflicting records are described by ``existing_count`` and
    ``existing_statuses``.
    """

    needs_confirmation: bool
    existing_count: int = 0
    existing_statuses: tuple[str, ...] = ()
    written_count: int = 0
    overwritten_count: int = 0
