from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType

LEAVE_TYPE_LABELS = {
    LeaveType.ANNUAL: "Cuti Tahunan",
    LeaveType.SICK: "Cuti Sakit",
    LeaveType.MATERNITY: "Cuti Hamil/Melahirkan",
    LeaveType.PATERNITY: "Cuti Ayah",
    LeaveType.UNPAID: "Cuti Tanpa Gaji",
    LeaveType.OTHER: "Cuti Lainnya",
}


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    requested_date: Optional[date] = None
    approved_by: Optional[int] = None
    approved_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def leave_type_label(self) -> str:
        return LEAVE_TYPE_LABELS.get(self.leave_type, self.leave_type.value)


@dataclass(frozen=True)
class LeaveStats:
    total: int
    pending: int
    approved: int
    rejected: int
    annual_days_used: int
