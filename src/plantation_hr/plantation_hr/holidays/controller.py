from __future__ import annotations

from flask import Flask, request

from ..common.web import bool_field, date_field, int_field, json_ok, permission_required, read_payload, to_json
from ..core.constants import MODULE_HOLIDAY
from ..core.enums import PermissionAction
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guard = container.permission_service
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @permission_required(guard, MODULE_HOLIDAY, PermissionAction.VIEW)
    def list_holidays():
        year = int_field(request.args, "year", "Tahun")
        return json_ok(service.list_holidays(year=year))

    @app.route("/api/holidays", methods=["POST"], endpoint="add_holiday")
    @permission_required(guard, MODULE_HOLIDAY, PermissionAction.CREATE)
    def add_holiday():
        payload = read_payload()
        result = service.add_holiday(
            holiday_date=date_field(payload, "holiday_date", "Tanggal"),
            name=payload.get("name") or "",
            category=payload.get("category") or "",
            is_paid=bool_field(payload, "is_paid", default=True),
            description=payload.get("description"),
            force_overwrite=bool_field(payload, "force_overwrite"),
        )
        if result.needs_confirmation:
            body = to_json(result)
            body["success"] = False
            body["message"] = (
                f"Sudah ada {result.existing_count} data absensi pada tanggal tersebut. "
                "Kirim ulang dengan force_overwrite=true untuk menimpa."
            )
            return body, 409
        return json_ok(result, message="Hari libur berhasil ditambahkan", status=201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="update_holiday")
    @permission_required(guard, MODULE_HOLIDAY, PermissionAction.EDIT)
    def update_holiday(holiday_id: int):
        payload = read_payload()
        holiday = service.update_holiday(
            holiday_id=holiday_id,
            name=payload.get("name") or "",
            category=payload.get("category") or "",
            is_paid=bool_field(payload, "is_paid", default=True),
            description=payload.get("description"),
        )
        return json_ok(holiday, message="Hari libur diperbarui")

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    @permission_required(guard, MODULE_HOLIDAY, PermissionAction.DELETE)
    def delete_holiday(holiday_id: int):
        removed = service.delete_holiday(holiday_id=holiday_id)
        return json_ok({"holiday_id": holiday_id, "attendance_removed": removed}, message="Hari libur dihapus")
