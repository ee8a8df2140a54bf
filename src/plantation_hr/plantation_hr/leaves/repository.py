from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
        requested_date: date,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``.

        Conditional on the row still being pending; returns False when another
        decision got there first.
        """

        raise NotImplementedError

    def count_by_status(self) -> dict[LeaveStatus, int]:
        raise NotImplementedError

    def sum_total_days(self, *, status: LeaveStatus, leave_type: LeaveType) -> int:
        raise NotImplementedError
