from __future__ import annotations

from flask import Flask

from ..common.web import date_field, int_field, json_ok, permission_required, read_payload, to_json
from ..core.constants import MODULE_PROBATION, MODULE_TERMINATION
from ..core.enums import PermissionAction, ProbationOutcome, TerminationOutcome
from ..container import Container
from .model import Employee
from .service import EmployeeLifecycleService


def _employee_json(employee: Employee) -> dict:
    data = to_json(employee)
    data["remaining_probation_days"] = EmployeeLifecycleService.remaining_probation_days(employee)
    return data


def register(app: Flask, container: Container) -> None:
    guard = container.permission_service
    service = container.lifecycle_service

    # Probation
    @app.route("/api/employees/probation", methods=["GET"], endpoint="list_probation")
    @permission_required(guard, MODULE_PROBATION, PermissionAction.VIEW)
    def list_probation():
        return json_ok([_employee_json(e) for e in service.list_probation()])

    @app.route("/api/employees/<int:employee_id>/probation/start", methods=["POST"], endpoint="start_probation")
    @permission_required(guard, MODULE_PROBATION, PermissionAction.EDIT)
    def start_probation(employee_id: int):
        payload = read_payload()
        employee = service.start_probation(
            employee_id=employee_id,
            start_date=date_field(payload, "start_date", "Tanggal mulai"),
            months=int_field(payload, "months", "Durasi"),
        )
        return json_ok(_employee_json(employee), message="Masa probasi dimulai")

    def _evaluate(employee_id: int, outcome: ProbationOutcome, message: str):
        payload = read_payload()
        employee = service.evaluate_probation(
            employee_id=employee_id,
            outcome=outcome,
            extend_months=int_field(payload, "months", "Durasi"),
        )
        return json_ok(_employee_json(employee), message=message)

    @app.route("/api/employees/<int:employee_id>/probation/pass", methods=["POST"], endpoint="pass_probation")
    @permission_required(guard, MODULE_PROBATION, PermissionAction.EDIT)
    def pass_probation(employee_id: int):
        return _evaluate(employee_id, ProbationOutcome.PASS, "Probasi lulus")

    @app.route("/api/employees/<int:employee_id>/probation/extend", methods=["POST"], endpoint="extend_probation")
    @permission_required(guard, MODULE_PROBATION, PermissionAction.EDIT)
    def extend_probation(employee_id: int):
        return _evaluate(employee_id, ProbationOutcome.EXTEND, "Probasi diperpanjang")

    @app.route("/api/employees/<int:employee_id>/probation/fail", methods=["POST"], endpoint="fail_probation")
    @permission_required(guard, MODULE_PROBATION, PermissionAction.EDIT)
    def fail_probation(employee_id: int):
        return _evaluate(employee_id, ProbationOutcome.FAIL, "Probasi tidak lulus")

    # Termination
    @app.route("/api/employees/termination", methods=["GET"], endpoint="list_termination")
    @permission_required(guard, MODULE_TERMINATION, PermissionAction.VIEW)
    def list_termination():
        return json_ok([_employee_json(e) for e in service.list_termination()])

    @app.route("/api/employees/<int:employee_id>/termination/request", methods=["POST"], endpoint="request_termination")
    @permission_required(guard, MODULE_TERMINATION, PermissionAction.CREATE)
    def request_termination(employee_id: int):
        employee = service.request_termination(employee_id=employee_id)
        return json_ok(_employee_json(employee), message="Pengajuan terminasi dibuat")

    @app.route("/api/employees/<int:employee_id>/termination/approve", methods=["POST"], endpoint="approve_termination")
    @permission_required(guard, MODULE_TERMINATION, PermissionAction.EDIT)
    def approve_termination(employee_id: int):
        payload = read_payload()
        employee = service.decide_termination(
            employee_id=employee_id,
            outcome=TerminationOutcome.APPROVE,
            reason=payload.get("reason"),
        )
        return json_ok(_employee_json(employee), message="Terminasi disetujui")

    @app.route("/api/employees/<int:employee_id>/termination/reject", methods=["POST"], endpoint="reject_termination")
    @permission_required(guard, MODULE_TERMINATION, PermissionAction.EDIT)
    def reject_termination(employee_id: int):
        employee = service.decide_termination(employee_id=employee_id, outcome=TerminationOutcome.REJECT)
        return json_ok(_employee_json(employee), message="Terminasi ditolak")
