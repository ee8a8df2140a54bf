from __future__ import annotations

from typing import Protocol

from ..core.enums import PermissionAction


class PermissionRepository(Protocol):
    def has_permission(self, *, role_id: int, module: str, action: PermissionAction) -> bool:
        raise NotImplementedError
