"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    DependencyFailure,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (DependencyFailure, 503),
)


def to_json(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {k: to_json(v) for k, v in asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    return value


def json_ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True, "data": to_json(data)}
    if message:
        body["message"] = message
    return jsonify(body), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def status_code_for(exc: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        code = status_code_for(e)
        if code >= 500:
            logger.error("Dependency failure on %s %s: %s", request.method, request.path, e)
        return json_error(str(e), code)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return json_error(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return json_error(f"Kesalahan sistem: {e}", 500)
        return json_error("Kesalahan sistem", 500)


def read_payload() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_field(payload: dict[str, Any], key: str, label: str) -> Optional[date]:
    raw = payload.get(key)
    if raw in (None, ""):
        return None
    try:
        return parse_iso_date(str(raw).strip())
    except ValueError:
        raise ValidationError(f"{label} harus berformat YYYY-MM-DD")


def int_field(payload: dict[str, Any], key: str, label: str) -> Optional[int]:
    raw = payload.get(key)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} harus berupa angka")


def bool_field(payload: dict[str, Any], key: str, default: bool = False) -> bool:
    raw = payload.get(key)
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthorizationError("Silakan login terlebih dahulu")
    return int(session["user_id"])


def permission_required(permission_service, module: str, action):
    """Guard a view with ``has_permission(module, action)`` for the session role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current_user_id()
            permission_service.require(role_id=session.get("role_id"), module=module, action=action)
            return view(*args, **kwargs)

        return wrapper

    return decorator
