from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, EmploymentType, TerminationReason, WorkflowStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, full_name, division_id, position_id,
    employment_type, join_date, status, workflow_status,
    probation_end_date, termination_reason
"""


def _to_employee(r: dict) -> Employee:
    reason = r.get("termination_reason")
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        full_name=r["full_name"],
        division_id=r.get("division_id"),
        position_id=r.get("position_id"),
        employment_type=EmploymentType(r["employment_type"]),
        join_date=r["join_date"],
        status=EmployeeStatus(r["status"]),
        workflow_status=WorkflowStatus(r.get("workflow_status") or WorkflowStatus.NONE.value),
        probation_end_date=r.get("probation_end_date"),
        termination_reason=TerminationReason(reason) if reason else None,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM employees WHERE status=%s ORDER BY employee_id ASC",
                (EmployeeStatus.ACTIVE.value,),
            )
            return [int(r["employee_id"]) for r in fetchall(cur)]

    def list_by_workflow_status(self, workflow_status: WorkflowStatus) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE workflow_status=%s ORDER BY full_name ASC",
                (workflow_status.value,),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update_assignment(self, *, employee_id: int, division_id: Optional[int], position_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET division_id=%s, position_id=%s, updated_at=NOW()
                WHERE employee_id=%s
                """,
                (division_id, position_id, int(employee_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET workflow_status=%s, status=%s, probation_end_date=%s,
                    termination_reason=%s, updated_at=NOW()
                WHERE employee_id=%s AND workflow_status=%s
                """,
                (
                    workflow_status.value,
                    status.value,
                    probation_end_date,
                    termination_reason.value if termination_reason else None,
                    int(employee_id),
                    expected_workflow_status.value,
                ),
            )
            return cur.rowcount > 0
