from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import TransferStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeTransfer
from .repository import TransferRepository

_COLUMNS = """
    transfer_id, employee_id, from_division_id, from_position_id,
    to_division_id, to_position_id, transfer_date, effective_date, status,
    reason, notes, requested_by, approved_by, approved_date, completed_date,
    created_at
"""


def _to_transfer(r: dict) -> EmployeeTransfer:
    return EmployeeTransfer(
        transfer_id=int(r["transfer_id"]),
        employee_id=int(r["employee_id"]),
        from_division_id=r.get("from_division_id"),
        from_position_id=r.get("from_position_id"),
        to_division_id=r.get("to_division_id"),
        to_position_id=r.get("to_position_id"),
        transfer_date=r["transfer_date"],
        effective_date=r["effective_date"],
        status=TransferStatus(r["status"]),
        reason=r.get("reason"),
        notes=r.get("notes"),
        requested_by=r.get("requested_by"),
        approved_by=r.get("approved_by"),
        approved_date=r.get("approved_date"),
        completed_date=r.get("completed_date"),
        created_at=r.get("created_at"),
    )


class MySQLTransferRepository(TransferRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_transfers(
                    employee_id, from_division_id, from_position_id,
                    to_division_id, to_position_id, transfer_date, effective_date,
                    reason, notes, status, requested_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    from_division_id,
                    from_position_id,
                    to_division_id,
                    to_position_id,
                    transfer_date,
                    effective_date,
                    reason,
                    notes,
                    TransferStatus.PENDING.value,
                    int(requested_by),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, transfer_id: int) -> Optional[EmployeeTransfer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employee_transfers WHERE transfer_id=%s", (int(transfer_id),))
            r = fetchone(cur)
            return _to_transfer(r) if r else None

    def list_transfers(self, *, status: Optional[TransferStatus] = None, limit: int = 500) -> Sequence[EmployeeTransfer]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM employee_transfers ORDER BY created_at DESC LIMIT %s",
                    (int(limit),),
                )
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM employee_transfers WHERE status=%s ORDER BY created_at DESC LIMIT %s",
                    (status.value, int(limit)),
                )
            return [_to_transfer(r) for r in fetchall(cur)]

    def list_due(self, *, today: date) -> Sequence[EmployeeTransfer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employee_transfers
                WHERE status=%s AND effective_date <= %s
                ORDER BY effective_date ASC, transfer_id ASC
                """,
                (TransferStatus.APPROVED.value, today),
            )
            return [_to_transfer(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        transfer_id: int,
        status: TransferStatus,
        decided_by: int,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_transfers
                SET status=%s, approved_by=%s, approved_date=NOW(),
                    notes=COALESCE(%s, notes), updated_at=NOW()
                WHERE transfer_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    notes,
                    int(transfer_id),
                    TransferStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_completed(self, *, transfer_id: int, completed_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_transfers
                SET status=%s, completed_date=%s, updated_at=NOW()
                WHERE transfer_id=%s AND status=%s
                """,
                (
                    TransferStatus.COMPLETED.value,
                    completed_date,
                    int(transfer_id),
                    TransferStatus.APPROVED.value,
                ),
            )
            return cur.rowcount > 0

    def count_by_status(self) -> dict[TransferStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM employee_transfers GROUP BY status")
            return {TransferStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}

    def count_by_change(self) -> dict[tuple[bool, bool], int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    NOT (from_division_id <=> to_division_id) AS division_changed,
                    NOT (from_position_id <=> to_position_id) AS position_changed,
                    COUNT(*) AS n
                FROM employee_transfers
                GROUP BY division_changed, position_changed
                """
            )
            return {
                (bool(r["division_changed"]), bool(r["position_changed"])): int(r["n"])
                for r in fetchall(cur)
            }
