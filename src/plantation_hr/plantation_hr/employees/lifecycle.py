"""Explicit state machine for the employee lifecycle.

``workflow_status`` and ``status`` are stored as two columns but always move
together through this table, so combinations such as probation + inactive
cannot be produced by the workflows.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.enums import EmployeeStatus, ProbationOutcome, TerminationOutcome, WorkflowStatus
from ..core.exceptions import InvalidStateError


class LifecycleAction(str, Enum):
    START_PROBATION = "start_probation"
    PASS_PROBATION = "pass_probation"
    EXTEND_PROBATION = "extend_probation"
    FAIL_PROBATION = "fail_probation"
    REQUEST_TERMINATION = "request_termination"
    APPROVE_TERMINATION = "approve_termination"
    REJECT_TERMINATION = "reject_termination"


@dataclass(frozen=True)
class LifecycleState:
    workflow_status: WorkflowStatus
    status: EmployeeStatus


ALLOWED_STATES: dict[WorkflowStatus, frozenset[EmployeeStatus]] = {
    WorkflowStatus.NONE: frozenset(EmployeeStatus),
    WorkflowStatus.RECRUITMENT: frozenset({EmployeeStatus.ACTIVE, EmployeeStatus.INACTIVE}),
    WorkflowStatus.PROBATION: frozenset({EmployeeStatus.ACTIVE, EmployeeStatus.ON_LEAVE}),
    WorkflowStatus.TERMINATION: frozenset({EmployeeStatus.ACTIVE, EmployeeStatus.ON_LEAVE}),
}

# (current workflow, action) -> (next workflow, next status); None keeps the status.
TRANSITIONS: dict[tuple[WorkflowStatus, LifecycleAction], tuple[WorkflowStatus, Optional[EmployeeStatus]]] = {
    (WorkflowStatus.NONE, LifecycleAction.START_PROBATION): (WorkflowStatus.PROBATION, EmployeeStatus.ACTIVE),
    (WorkflowStatus.PROBATION, LifecycleAction.PASS_PROBATION): (WorkflowStatus.NONE, EmployeeStatus.ACTIVE),
    (WorkflowStatus.PROBATION, LifecycleAction.EXTEND_PROBATION): (WorkflowStatus.PROBATION, EmployeeStatus.ACTIVE),
    (WorkflowStatus.PROBATION, LifecycleAction.FAIL_PROBATION): (WorkflowStatus.NONE, EmployeeStatus.INACTIVE),
    (WorkflowStatus.NONE, LifecycleAction.REQUEST_TERMINATION): (WorkflowStatus.TERMINATION, None),
    (WorkflowStatus.TERMINATION, LifecycleAction.APPROVE_TERMINATION): (WorkflowStatus.NONE, EmployeeStatus.INACTIVE),
    (WorkflowStatus.TERMINATION, LifecycleAction.REJECT_TERMINATION): (WorkflowStatus.NONE, EmployeeStatus.ACTIVE),
}

# Employment statuses an action may start from; absent actions accept any status.
REQUIRED_STATUS: dict[LifecycleAction, frozenset[EmployeeStatus]] = {
    LifecycleAction.START_PROBATION: frozenset({EmployeeStatus.ACTIVE}),
    LifecycleAction.REQUEST_TERMINATION: frozenset({EmployeeStatus.ACTIVE, EmployeeStatus.ON_LEAVE}),
}

PROBATION_ACTIONS = {
    ProbationOutcome.PASS: LifecycleAction.PASS_PROBATION,
    ProbationOutcome.EXTEND: LifecycleAction.EXTEND_PROBATION,
    ProbationOutcome.FAIL: LifecycleAction.FAIL_PROBATION,
}

TERMINATION_ACTIONS = {
    TerminationOutcome.APPROVE: LifecycleAction.APPROVE_TERMINATION,
    TerminationOutcome.REJECT: LifecycleAction.REJECT_TERMINATION,
}


def is_allowed_state(state: LifecycleState) -> bool:
    return state.status in ALLOWED_STATES.get(state.workflow_status, frozenset())


def next_state(current: LifecycleState, action: LifecycleAction) -> LifecycleState:
    target = TRANSITIONS.get((current.workflow_status, action))
    if target is None:
        raise InvalidStateError(
            f"Aksi '{action.value}' tidak diizinkan dari workflow '{current.workflow_status.value}'"
        )

    required = REQUIRED_STATUS.get(action)
    if required is not None and current.status not in required:
        raise InvalidStateError(
            f"Status karyawan '{current.status.value}' tidak memenuhi syarat untuk aksi '{action.value}'"
        )

    workflow_status, status = target
    nxt = LifecycleState(workflow_status=workflow_status, status=status or current.status)
    if not is_allowed_state(nxt):
        raise InvalidStateError(
            f"Kombinasi status tidak valid: workflow '{nxt.workflow_status.value}' dengan status '{nxt.status.value}'"
        )
    return nxt
