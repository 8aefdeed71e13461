"""
errors.py
- Purpose: AppError used across services/adapters for consistent errors.
- Pattern: raise AppError(...) in service/adapter, handler converts to JSON response.

The subclasses name the failure families of the upload/save flow so callers
can branch with isinstance instead of inspecting codes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import status as http_status
from app.core.error_codes import ErrorCode
from app.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __post_init__(self) -> None:
        # str() of an enum member is "ErrorReason.X"; keep only the text
        if isinstance(self.reason, Enum):
            self.reason = self.reason.value

    def __str__(self) -> str:
        return self.message if self.message else str(self.reason)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class ValidationError(AppError):
    """Bad file or missing required field. Never reaches the network."""


class TransferError(AppError):
    """Byte transfer or durable-reference resolution failed."""


class PersistenceError(AppError):
    """The create/update call to the persistence API failed."""


class ReferenceParseError(AppError):
    """A locator did not have the expected storage URL shape."""


# Convenience constructors (optional but makes services cleaner)
def validation_error(
    reason: str = ErrorReason.INVALID_INPUT,
    *,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    message: str | None = None,
    details: dict | None = None,
) -> ValidationError:
    return ValidationError(
        code=code,
        reason=reason,
        status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
        details=details,
        message=message,
    )


def transfer_error(
    message: str | None = None,
    *,
    reason: str = ErrorReason.UPLOAD_FAILED,
    code: ErrorCode = ErrorCode.STORAGE_UPLOAD_FAILED,
    details: dict | None = None,
) -> TransferError:
    return TransferError(
        code=code,
        reason=reason,
        status_code=http_status.HTTP_502_BAD_GATEWAY,
        details=details,
        message=message,
    )


def persistence_error(
    message: str | None = None,
    *,
    status_code: int = http_status.HTTP_502_BAD_GATEWAY,
    details: dict | None = None,
) -> PersistenceError:
    return PersistenceError(
        code=ErrorCode.PERSISTENCE_FAILED,
        reason=ErrorReason.PERSISTENCE_FAILED,
        status_code=status_code,
        details=details,
        message=message,
    )


def reference_parse_error(reference: str) -> ReferenceParseError:
    return ReferenceParseError(
        code=ErrorCode.INVALID_REFERENCE,
        reason=ErrorReason.INVALID_REFERENCE,
        status_code=http_status.HTTP_400_BAD_REQUEST,
        details={"reference": reference},
    )


def not_found(reason: str = ErrorReason.RESOURCE_NOT_FOUND, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.NOT_FOUND, reason=reason, status_code=http_status.HTTP_404_NOT_FOUND, details=details)


def conflict(reason: str = ErrorReason.ALREADY_EXISTS, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.CONFLICT, reason=reason, status_code=http_status.HTTP_409_CONFLICT, details=details)


def internal_error(reason: str = ErrorReason.UNKNOWN, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.INTERNAL_ERROR, reason=reason, status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
