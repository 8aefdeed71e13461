# app/core/__init__.py
from app.core.errors import (
    AppError,
    PersistenceError,
    ReferenceParseError,
    TransferError,
    ValidationError,
)
from app.core.error_codes import ErrorCode
from app.core.error_reasons import ErrorReason

__all__ = [
    "AppError",
    "ErrorCode",
    "ErrorReason",
    "PersistenceError",
    "ReferenceParseError",
    "TransferError",
    "ValidationError",
]
