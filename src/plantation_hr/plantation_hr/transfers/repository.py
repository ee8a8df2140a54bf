from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import TransferStatus
from .model import EmployeeTransfer


class TransferRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        from_division_id: Optional[int],
        from_position_id: Optional[int],
        to_division_id: Optional[int],
        to_position_id: Optional[int],
        transfer_date: date,
        effective_date: date,
        reason: Optional[str],
        notes: Optional[str],
        requested_by: int,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, transfer_id: int) -> Optional[EmployeeTransfer]:
        raise NotImplementedError

    def list_transfers(self, *, status: Optional[TransferStatus] = None, limit: int = 500) -> Sequence[EmployeeTransfer]:
        raise NotImplementedError

    def list_due(self, *, today: date) -> Sequence[EmployeeTransfer]:
        """Approved transfers whose effective date is on or before ``today``."""

        raise NotImplementedError

    def decide(
        self,
        *,
        transfer_id: int,
        status: TransferStatus,
        decided_by: int,
        notes: Optional[str] = None,
    ) -> bool:
        """Pending -> approved/rejected; False if the row is no longer pending."""

        raise NotImplementedError

    def mark_completed(self, *, transfer_id: int, completed_date: date) -> bool:
        """Approved -> completed; False if the row is no longer approved."""

        raise NotImplementedError

    def count_by_status(self) -> dict[TransferStatus, int]:
        raise NotImplementedError

    def count_by_change(self) -> dict[tuple[bool, bool], int]:
        """Row counts keyed by (division changed, position changed)."""

        raise NotImplementedError
