from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return value.strip()


def require_present(value: Any, field_name: str) -> Any:
    if value is None or value == "":
        raise ValidationError(f"{field_name} wajib diisi")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
