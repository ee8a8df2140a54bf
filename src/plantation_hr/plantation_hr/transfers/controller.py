from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, date_field, int_field, json_ok, permission_required, read_payload, to_json
from ..core.constants import MODULE_TRANSFER
from ..core.enums import PermissionAction, TransferStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import EmployeeTransfer, classify_transfer


def _transfer_json(transfer: EmployeeTransfer) -> dict:
    data = to_json(transfer)
    data["transfer_type"] = classify_transfer(transfer).value
    return data


def register(app: Flask, container: Container) -> None:
    guard = container.permission_service
    service = container.transfer_service

    @app.route("/api/transfers", methods=["GET"], endpoint="list_transfers")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.VIEW)
    def list_transfers():
        # Opportunistic due scan: approved transfers whose date has arrived are completed first.
        report = service.auto_complete_due()

        status = request.args.get("status") or None
        try:
            status = TransferStatus(status) if status else None
        except ValueError:
            raise ValidationError("Status mutasi tidak valid")

        return json_ok({
            "transfers": [_transfer_json(t) for t in service.list_transfers(status=status)],
            "statistics": service.statistics(),
            "auto_completed": [t.transfer_id for t in report.completed],
            "auto_complete_failures": report.failures,
        })

    @app.route("/api/transfers", methods=["POST"], endpoint="submit_transfer")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.CREATE)
    def submit_transfer():
        payload = read_payload()
        transfer = service.submit(
            employee_id=int_field(payload, "employee_id", "Karyawan"),
            to_division_id=int_field(payload, "to_division_id", "Divisi tujuan"),
            to_position_id=int_field(payload, "to_position_id", "Jabatan tujuan"),
            transfer_date=date_field(payload, "transfer_date", "Tanggal mutasi"),
            effective_date=date_field(payload, "effective_date", "Tanggal efektif"),
            reason=payload.get("reason"),
            notes=payload.get("notes"),
            requested_by=current_user_id(),
        )
        return json_ok(_transfer_json(transfer), message="Pengajuan mutasi berhasil dibuat", status=201)

    @app.route("/api/transfers/<int:transfer_id>/approve", methods=["POST"], endpoint="approve_transfer")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.EDIT)
    def approve_transfer(transfer_id: int):
        transfer = service.approve(transfer_id=transfer_id, approver_id=current_user_id())
        return json_ok(_transfer_json(transfer), message="Mutasi disetujui")

    @app.route("/api/transfers/<int:transfer_id>/reject", methods=["POST"], endpoint="reject_transfer")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.EDIT)
    def reject_transfer(transfer_id: int):
        payload = read_payload()
        transfer = service.reject(transfer_id=transfer_id, approver_id=current_user_id(), notes=payload.get("notes"))
        return json_ok(_transfer_json(transfer), message="Mutasi ditolak")

    @app.route("/api/transfers/<int:transfer_id>/complete", methods=["POST"], endpoint="complete_transfer")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.EDIT)
    def complete_transfer(transfer_id: int):
        transfer = service.complete(transfer_id=transfer_id)
        return json_ok(_transfer_json(transfer), message="Mutasi selesai")

    @app.route("/api/transfers/auto-complete", methods=["POST"], endpoint="auto_complete_transfers")
    @permission_required(guard, MODULE_TRANSFER, PermissionAction.EDIT)
    def auto_complete_transfers():
        report = service.auto_complete_due()
        return json_ok({
            "completed": [_transfer_json(t) for t in report.completed],
            "failures": report.failures,
        })
