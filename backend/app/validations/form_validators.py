"""
form_validators.py
- Purpose: Required-field checks for the admin entity forms.
- Design: Run before any network call; raise ValidationError with the
  message shown above the form.
"""

from typing import Any, Mapping

from app.core import ErrorCode
from app.core.errors import validation_error


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: Mapping[str, Any], rules: list[tuple[str, str]]) -> None:
    """
    rules: (field, message) pairs checked in order; the first blank field fails.
    """
    for name, message in rules:
        if _blank(values.get(name)):
            raise validation_error(
                code=ErrorCode.REQUIRED_FIELD_MISSING,
                message=message,
                details={"field": name},
            )


def require_asset(has_pending_file: bool, reference: str, message: str, *, field: str) -> None:
    if not has_pending_file and _blank(reference):
        raise validation_error(
            code=ErrorCode.REQUIRED_FIELD_MISSING,
            message=message,
            details={"field": field},
        )


def coerce_int(value: Any, default: int = 0) -> int:
    if _blank(value):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise validation_error(message=f"Expected a number, got {value!r}")


def coerce_str(value: Any, default: str = "0") -> str:
    return default if value is None else str(value)
