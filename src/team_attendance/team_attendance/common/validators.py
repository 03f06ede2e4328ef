from __future__ import annotations

from typing import Any, Optional

from ..core.enums import CheckInMethod
from ..core.exceptions import ValidationError


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message=f"{field_name} must be an integer")


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name)


def optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(message=f"{field_name} must be a number")


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_method(value: Any) -> CheckInMethod:
    try:
        return CheckInMethod(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in CheckInMethod)
        raise ValidationError(message=f"method must be one of: {allowed}")
