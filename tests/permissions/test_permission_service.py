from __future__ import annotations

import pytest

from src.plantation_hr.plantation_hr.core.constants import MODULE_HOLIDAY, MODULE_LEAVE
from src.plantation_hr.plantation_hr.core.enums import PermissionAction
from src.plantation_hr.plantation_hr.core.exceptions import AuthorizationError
from src.plantation_hr.plantation_hr.permissions.service import PermissionService


@pytest.fixture
def service(permissions_repo):
    permissions_repo.grants = {(2, MODULE_LEAVE, "view"), (2, MODULE_LEAVE, "edit")}
    return PermissionService(permissions_repo)


def test_granted_action(service):
    assert service.has_permission(role_id=2, module=MODULE_LEAVE, action="edit") is True
    assert service.has_permission(role_id=2, module=MODULE_LEAVE, action=PermissionAction.VIEW) is True


def test_missing_grant_and_unknown_action(service):
    assert service.has_permission(role_id=2, module=MODULE_HOLIDAY, action="view") is False
    assert service.has_permission(role_id=2, module=MODULE_LEAVE, action="approve") is False
    assert service.has_permission(role_id=None, module=MODULE_LEAVE, action="view") is False


def test_require_raises_authorization_error(service):
    service.require(role_id=2, module=MODULE_LEAVE, action="edit")

    with pytest.raises(AuthorizationError):
        service.require(role_id=2, module=MODULE_LEAVE, action="delete")
