from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, date_field, int_field, json_ok, permission_required, read_payload, to_json
from ..core.constants import MODULE_LEAVE
from ..core.enums import LeaveStatus, PermissionAction
from ..core.exceptions import ValidationError
from ..container import Container
from .model import LeaveRequest


def _leave_json(req: LeaveRequest) -> dict:
    data = to_json(req)
    data["leave_type_label"] = req.leave_type_label
    return data


def register(app: Flask, container: Container) -> None:
    guard = container.permission_service
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @permission_required(guard, MODULE_LEAVE, PermissionAction.VIEW)
    def list_leaves():
        status = request.args.get("status") or None
        try:
            status = LeaveStatus(status) if status else None
        except ValueError:
            raise ValidationError("Status cuti tidak valid")

        rows = service.list_requests(
            status=status,
            employee_id=int_field(request.args, "employee_id", "Karyawan"),
        )
        return json_ok({
            "requests": [_leave_json(r) for r in rows],
            "statistics": service.statistics(),
        })

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @permission_required(guard, MODULE_LEAVE, PermissionAction.CREATE)
    def submit_leave():
        payload = read_payload()
        req = service.submit(
            employee_id=int_field(payload, "employee_id", "Karyawan"),
            leave_type=payload.get("leave_type") or "",
            start_date=date_field(payload, "start_date", "Tanggal mulai"),
            end_date=date_field(payload, "end_date", "Tanggal selesai"),
            reason=payload.get("reason") or "",
        )
        return json_ok(_leave_json(req), message="Pengajuan cuti berhasil dibuat", status=201)

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @permission_required(guard, MODULE_LEAVE, PermissionAction.EDIT)
    def approve_leave(request_id: int):
        req = service.approve(request_id=request_id, approver_id=current_user_id())
        return json_ok(_leave_json(req), message="Cuti disetujui")

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @permission_required(guard, MODULE_LEAVE, PermissionAction.EDIT)
    def reject_leave(request_id: int):
        payload = read_payload()
        req = service.reject(
            request_id=request_id,
            approver_id=current_user_id(),
            reason=payload.get("rejection_reason") or payload.get("reason") or "",
        )
        return json_ok(_leave_json(req), message="Cuti ditolak")

    @app.route("/api/leaves/<int:request_id>/rematerialize", methods=["POST"], endpoint="rematerialize_leave")
    @permission_required(guard, MODULE_LEAVE, PermissionAction.EDIT)
    def rematerialize_leave(request_id: int):
        days = service.rematerialize(request_id=request_id)
        return json_ok({"request_id": request_id, "days_written": days})
