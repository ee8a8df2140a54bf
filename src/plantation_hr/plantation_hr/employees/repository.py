from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, TerminationReason, WorkflowStatus
from .model import Employee


class EmployeeRepository(Protocol):
    """Port to the employees table.

    Note: master data CRUD lives elsewhere; the workflows only need reads,
    assignment moves and lifecycle updates.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active_ids(self) -> Sequence[int]:
        raise NotImplementedError

    def list_by_workflow_status(self, workflow_status: WorkflowStatus) -> Sequence[Employee]:
        raise NotImplementedError

    def update_assignment(self, *, employee_id: int, division_id: Optional[int], position_id: Optional[int]) -> bool:
        raise NotImplementedError

    def update_lifecycle(
        self,
        *,
        employee_id: int,
        expected_workflow_status: WorkflowStatus,
        workflow_status: WorkflowStatus,
        status: EmployeeStatus,
        probation_end_date: Optional[date],
        termination_reason: Optional[TerminationReason],
    ) -> bool:
        """Conditional update: only applies while the row still has
        ``expected_workflow_status``. Returns False otherwise."""

        raise NotImplementedError
