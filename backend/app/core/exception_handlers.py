"""
exception_handlers.py
- Purpose: Turn AppError (and anything unexpected) into the {"error": {...}} body
  the admin console renders above the form.

Each AppError subclass maps to a failure family so logs can be filtered by
where the save broke: before the network, during the byte transfer, or at the
persistence API.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core import (
    AppError,
    ErrorCode,
    PersistenceError,
    ReferenceParseError,
    TransferError,
    ValidationError,
)
from app.core.error_reasons import ErrorReason

logger = logging.getLogger("app.exceptions")

_FAMILIES: tuple[tuple[type[AppError], str], ...] = (
    (ValidationError, "validation"),
    (TransferError, "transfer"),
    (PersistenceError, "persistence"),
    (ReferenceParseError, "reference"),
)


def error_family(exc: AppError) -> str:
    for cls, family in _FAMILIES:
        if isinstance(exc, cls):
            return family
    return "app"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    family = error_family(exc)
    # 5xx: storage or the persistence API failed. 4xx: the submitted form was bad
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"{family}_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "code": exc.code,
            "reason": exc.reason,
            "family": family,
            "details": exc.details,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": ErrorCode.INTERNAL_ERROR,
                "reason": ErrorReason.UNKNOWN.value,
                "message": "Something went wrong while saving. Please try again.",
            }
        },
    )
