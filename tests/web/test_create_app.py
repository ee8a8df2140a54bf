from __future__ import annotations

import importlib

from src.plantation_hr.plantation_hr import main
from src.plantation_hr.plantation_hr.container import Container
from src.plantation_hr.plantation_hr.core.constants import DEFAULT_PROBATION_MONTHS, DEFAULT_REST_WEEKDAY
from src.plantation_hr.plantation_hr.employees.service import EmployeeLifecycleService
from src.plantation_hr.plantation_hr.holidays.service import HolidayService
from src.plantation_hr.plantation_hr.leaves.service import LeaveService
from src.plantation_hr.plantation_hr.permissions.service import PermissionService
from src.plantation_hr.plantation_hr.transfers.service import TransferService


def test_create_app_falls_back_to_default_calendar_settings(
    monkeypatch, holidays_repo, employees_repo, leaves_repo, transfers_repo, permissions_repo,
    calendar_service, materializer,
):
    settings = importlib.import_module("config.testing")
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.delattr(settings, "WEEKLY_REST_DAY")
    monkeypatch.delattr(settings, "PROBATION_MONTHS")
    monkeypatch.setattr(settings, "AUTO_INIT_DB", False)
    monkeypatch.setattr(settings, "AUTO_SEED_DB", False)

    captured = {}

    def fake_build_container(*, db_config, rest_weekday, probation_months):
        captured.update(rest_weekday=rest_weekday, probation_months=probation_months)
        return Container(
            conn=None,
            calendar_service=calendar_service,
            materializer=materializer,
            permission_service=PermissionService(permissions_repo),
            holiday_service=HolidayService(holidays_repo, materializer),
            leave_service=LeaveService(leaves_repo, employees_repo, calendar_service, materializer),
            transfer_service=TransferService(transfers_repo, employees_repo),
            lifecycle_service=EmployeeLifecycleService(employees_repo, probation_months=probation_months),
        )

    monkeypatch.setattr(main, "build_container", fake_build_container)

    app = main.create_app()

    assert captured == {"rest_weekday": DEFAULT_REST_WEEKDAY, "probation_months": DEFAULT_PROBATION_MONTHS}
    assert app.extensions["plantation_hr"].permission_service is not None
