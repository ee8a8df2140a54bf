from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import add_months, today_local
from ..core.constants import DEFAULT_PROBATION_MONTHS
from ..core.enums import ProbationOutcome, TerminationOutcome, TerminationReason, WorkflowStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from .lifecycle import (
    PROBATION_ACTIONS,
    TERMINATION_ACTIONS,
    LifecycleAction,
    LifecycleState,
    next_state,
)
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeLifecycleService:
    """Use cases: probation and termination decisions.

    Every decision takes effect immediately (no pending/approved split);
    the permission check happens at the HTTP boundary.
    """

    def __init__(self, employees: EmployeeRepository, *, probation_months: int = DEFAULT_PROBATION_MONTHS):
        self._employees = employees
        self._probation_months = int(probation_months)

    def _get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        return employee

    def _apply(
        self,
        employee: Employee,
        action: LifecycleAction,
        *,
        probation_end_date: Optional[date],
        termination_reason: Optional[TerminationReason],
    ) -> Employee:
        current = LifecycleState(workflow_status=employee.workflow_status, status=employee.status)
        nxt = next_state(current, action)

        ok = self._employees.update_lifecycle(
            employee_id=employee.employee_id,
            expected_workflow_status=employee.workflow_status,
            workflow_status=nxt.workflow_status,
            status=nxt.status,
            probation_end_date=probation_end_date,
            termination_reason=termination_reason,
        )
        if not ok:
            raise InvalidStateError("Status karyawan telah berubah, muat ulang data")

        logger.info(
            "Employee %s: %s (%s/%s -> %s/%s)",
            employee.employee_id, action.value,
            current.workflow_status.value, current.status.value,
            nxt.workflow_status.value, nxt.status.value,
        )
        return self._get(employee.employee_id)

    # Probation
    def start_probation(
        self,
        *,
        employee_id: int,
        start_date: Optional[date] = None,
        months: Optional[int] = None,
    ) -> Employee:
        employee = self._get(employee_id)
        months = int(months or self._probation_months)
        if months <= 0:
            raise ValidationError("Durasi probasi harus lebih dari 0 bulan")

        end_date = add_months(start_date or employee.join_date, months)
        return self._apply(
            employee,
            LifecycleAction.START_PROBATION,
            probation_end_date=end_date,
            termination_reason=employee.termination_reason,
        )

    def evaluate_probation(
        self,
        *,
        employee_id: int,
        outcome: ProbationOutcome | str,
        extend_months: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Employee:
        try:
            outcome = ProbationOutcome(outcome)
        except ValueError:
            raise ValidationError("Hasil probasi tidak valid")

        employee = self._get(employee_id)
        end_date = employee.probation_end_date
        if outcome == ProbationOutcome.EXTEND:
            months = int(extend_months or self._probation_months)
            if months <= 0:
                raise ValidationError("Durasi perpanjangan harus lebih dari 0 bulan")
            base = max(end_date, today or today_local()) if end_date else (today or today_local())
            end_date = add_months(base, months)

        return self._apply(
            employee,
            PROBATION_ACTIONS[outcome],
            probation_end_date=end_date,
            termination_reason=employee.termination_reason,
        )

    def list_probation(self) -> Sequence[Employee]:
        return self._employees.list_by_workflow_status(WorkflowStatus.PROBATION)

    @staticmethod
    def remaining_probation_days(employee: Employee, *, today: Optional[date] = None) -> Optional[int]:
        if employee.probation_end_date is None:
            return None
        return (employee.probation_end_date - (today or today_local())).days

    # Termination
    def request_termination(self, *, employee_id: int) -> Employee:
        employee = self._get(employee_id)
        return self._apply(
            employee,
            LifecycleAction.REQUEST_TERMINATION,
            probation_end_date=employee.probation_end_date,
            termination_reason=None,
        )

    def decide_termination(
        self,
        *,
        employee_id: int,
        outcome: TerminationOutcome | str,
        reason: Optional[TerminationReason | str] = None,
    ) -> Employee:
        try:
            outcome = TerminationOutcome(outcome)
        except ValueError:
            raise ValidationError("Keputusan terminasi tidak valid")

        termination_reason: Optional[TerminationReason] = None
        if outcome == TerminationOutcome.APPROVE:
            if not reason:
                raise ValidationError("Alasan terminasi wajib diisi")
            try:
                termination_reason = TerminationReason(reason)
            except ValueError:
                raise ValidationError("Alasan terminasi tidak valid")

        employee = self._get(employee_id)
        return self._apply(
            employee,
            TERMINATION_ACTIONS[outcome],
            probation_end_date=employee.probation_end_date,
            termination_reason=termination_reason,
        )

    def list_termination(self) -> Sequence[Employee]:
        return self._employees.list_by_workflow_status(WorkflowStatus.TERMINATION)
