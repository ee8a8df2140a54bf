from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, status, check_in, check_out, working_hours, overtime_hours, notes"


def _to_record(r: dict) -> AttendanceRecord:
    working = r.get("working_hours")
    overtime = r.get("overtime_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        working_hours=float(working) if working is not None else None,
        overtime_hours=float(overtime) if overtime is not None else None,
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_on_date(self, *, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY employee_id ASC",
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_status(
        self,
        *,
        employee_ids: Sequence[int],
        work_dates: Sequence[date],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        rows = [(int(e), d, status.value, notes) for e in employee_ids for d in work_dates]
        if not rows:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            # Relies on UNIQUE KEY uq_attendance_employee_date (employee_id, work_date).
            cur.executemany(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, status, notes,
                    check_in, check_out, working_hours, overtime_hours
                )
                VALUES(%s,%s,%s,%s,NULL,NULL,NULL,0)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), notes=VALUES(notes),
                    check_in=NULL, check_out=NULL, working_hours=NULL, overtime_hours=0
                """,
                rows,
            )
            return len(rows)

    def delete_by_status(
        self,
        *,
        work_date: date,
        status: AttendanceStatus,
        employee_id: Optional[int] = None,
    ) -> int:
        clauses = ["work_date=%s", "status=%s"]
        params: list[object] = [work_date, status.value]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM attendance_records WHERE {where}", tuple(params))
            return int(cur.rowcount)
