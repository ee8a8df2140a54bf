from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EmployeeStatus, EmploymentType, TerminationReason, WorkflowStatus


@dataclass(frozen=True)
class Employee:
    """Identitas karyawan + snapshot penempatan saat ini.

    Note: ``workflow_status`` is only changed by the lifecycle workflows,
    never by generic employee edits.
    """

    employee_id: int
    employee_code: str
    full_name: str
    division_id: Optional[int]
    position_id: Optional[int]
    employment_type: EmploymentType
    join_date: date
    status: EmployeeStatus
    workflow_status: WorkflowStatus = WorkflowStatus.NONE
    probation_end_date: Optional[date] = None
    termination_reason: Optional[TerminationReason] = None
