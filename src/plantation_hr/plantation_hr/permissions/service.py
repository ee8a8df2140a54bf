from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import PermissionAction
from ..core.exceptions import AuthorizationError
from .repository import PermissionRepository

logger = logging.getLogger(__name__)


class PermissionService:
    """``has_permission(module, action)`` oracle backed by role_permissions."""

    def __init__(self, permissions: PermissionRepository):
        self._permissions = permissions

    def has_permission(self, *, role_id: Optional[int], module: str, action: PermissionAction | str) -> bool:
        if role_id is None:
            return False
        try:
            action = PermissionAction(action)
        except ValueError:
            return False
        return self._permissions.has_permission(role_id=int(role_id), module=module, action=action)

    def require(self, *, role_id: Optional[int], module: str, action: PermissionAction | str) -> None:
        if not self.has_permission(role_id=role_id, module=module, action=action):
            logger.warning("Role %s denied %s on %s", role_id, action, module)
            raise AuthorizationError("Anda tidak memiliki akses")
