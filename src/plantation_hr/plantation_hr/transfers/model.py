from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import TransferStatus, TransferType


@dataclass(frozen=True)
class EmployeeTransfer:
    """Mutasi karyawan antar divisi/jabatan.

    ``from_*`` is the employee's assignment captured at submission time.
    """

    transfer_id: int
    employee_id: int
    from_division_id: Optional[int]
    from_position_id: Optional[int]
    to_division_id: Optional[int]
    to_position_id: Optional[int]
    transfer_date: date
    effective_date: date
    status: TransferStatus
    reason: Optional[str] = None
    notes: Optional[str] = None
    requested_by: Optional[int] = None
    approved_by: Optional[int] = None
    approved_date: Optional[datetime] = None
    completed_date: Optional[date] = None
    created_at: Optional[datetime] = None


def transfer_type_for(division_changed: bool, position_changed: bool) -> TransferType:
    if division_changed and position_changed:
        return TransferType.BOTH
    if division_changed:
        return TransferType.DIVISION
    # Also the fallback for a degenerate no-op record.
    return TransferType.POSITION


def classify_transfer(transfer: EmployeeTransfer) -> TransferType:
    return transfer_type_for(
        transfer.from_division_id != transfer.to_division_id,
        transfer.from_position_id != transfer.to_position_id,
    )


@dataclass(frozen=True)
class TransferFailure:
    transfer_id: int
    error: str


@dataclass(frozen=True)
class AutoCompleteReport:
    completed: tuple[EmployeeTransfer, ...] = ()
    failures: tuple[TransferFailure, ...] = ()


@dataclass(frozen=True)
class TransferStats:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)
