"""
request_logging.py
- Purpose: One request/response log pair per admin call, tagged with a request id.
- Multipart form posts also log their body size, since that is where the image rides.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.request_context import clear_context, set_context

logger = logging.getLogger("app.http")


def _body_size(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        set_context(request_id=rid)

        request_fields = {"method": request.method, "path": request.url.path}
        if request.headers.get("content-type", "").startswith("multipart/form-data"):
            request_fields["multipart_bytes"] = _body_size(request)

        started = time.perf_counter()
        try:
            logger.info("http.request", extra=request_fields)
            try:
                response: Response = await call_next(request)
            except Exception:
                logger.exception(
                    "http.crashed",
                    extra={**request_fields, "duration_ms": int((time.perf_counter() - started) * 1000)},
                )
                raise

            logger.log(
                logging.WARNING if response.status_code >= 500 else logging.INFO,
                "http.response",
                extra={
                    **request_fields,
                    "status_code": response.status_code,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                },
            )
            response.headers["x-request-id"] = rid
            return response
        finally:
            clear_context()
