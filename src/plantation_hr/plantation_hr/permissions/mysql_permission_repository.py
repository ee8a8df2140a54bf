from __future__ import annotations

from ..core.enums import PermissionAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import PermissionRepository

_ACTION_COLUMNS = {
    PermissionAction.VIEW: "can_view",
    PermissionAction.CREATE: "can_create",
    PermissionAction.EDIT: "can_edit",
    PermissionAction.DELETE: "can_delete",
}


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def has_permission(self, *, role_id: int, module: str, action: PermissionAction) -> bool:
        column = _ACTION_COLUMNS[action]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {column} AS allowed FROM role_permissions WHERE role_id=%s AND module_name=%s",
                (int(role_id), module),
            )
            r = fetchone(cur)
            return bool(r and r["allowed"])
