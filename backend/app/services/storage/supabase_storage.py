"""
supabase_storage.py
- Purpose: Blob transfer adapter for Supabase Storage (public asset bucket).
- Owns: streamed upload with progress, public URL resolution, delete by URL.
- Design: Treat as an infrastructure adapter; no business logic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator
from urllib.parse import quote, unquote, urlparse

import httpx

from app.core import AppError, ErrorCode, ErrorReason
from app.core.config import settings
from app.core.errors import reference_parse_error, transfer_error
from app.services.storage.transfer import TransferHandle

logger = logging.getLogger("app.storage")

PUBLIC_OBJECT_MARKER = "/storage/v1/object/public/"


@dataclass(frozen=True)
class StoredObject:
    bucket: str
    path: str


def parse_object_reference(reference: str) -> StoredObject:
    """
    Pull bucket + object path out of a public URL:
    https://<project>.supabase.co/storage/v1/object/public/{bucket}/{path}[?...]
    """
    parsed = urlparse(reference or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise reference_parse_error(reference)

    if PUBLIC_OBJECT_MARKER not in parsed.path:
        raise reference_parse_error(reference)

    rest = parsed.path.split(PUBLIC_OBJECT_MARKER, 1)[1]
    bucket, _, obj_path = rest.partition("/")
    if not bucket or not obj_path:
        raise reference_parse_error(reference)

    return StoredObject(bucket=unquote(bucket), path=unquote(obj_path))


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = resp.text
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    elif isinstance(body, str) and body.strip():
        return body.strip()
    return f"HTTP {resp.status_code}"


class SupabaseStorage:
    """
    Adapter around Supabase Storage.

    Assumptions:
    - Bucket is public, so a public URL is a durable reference
    - Uploads never overwrite (x-upsert: false); paths are unique per ms + name
    - Bytes are streamed in chunks so progress can be reported while sending
    """

    def __init__(
        self,
        bucket: str | None = None,
        *,
        client: Any = None,
        http: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        service_key: str | None = None,
        chunk_bytes: int | None = None,
    ):
        self._bucket = bucket or settings.SUPABASE_STORAGE_BUCKET
        self._base_url = (base_url or settings.SUPABASE_URL).rstrip("/")
        self._key = service_key if service_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        self._chunk_bytes = chunk_bytes or settings.UPLOAD_CHUNK_BYTES
        self._http = http

        if client is None:
            # Import lazily so missing dependency errors are localized.
            try:
                from supabase import create_client  # type: ignore
            except ImportError as e:
                raise AppError(
                    code=ErrorCode.CONFIG_ERROR,
                    reason=ErrorReason.MISSING_DEPENDENCY,
                    message="Supabase client library is not installed or failed to import",
                    status_code=500,
                ) from e
            client = create_client(self._base_url, self._key)

        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    # ---------- upload ----------

    def begin_upload(self, data: bytes, destination_path: str, content_type: str) -> TransferHandle:
        """
        Start streaming `data` to `destination_path`. Must be called from a running loop.
        The returned handle yields progress events and one terminal event.
        """
        handle = TransferHandle()
        task = asyncio.create_task(self._stream_upload(handle, data, destination_path, content_type))
        handle.attach(task)
        return handle

    async def _chunks(self, handle: TransferHandle, data: bytes) -> AsyncIterator[bytes]:
        total = len(data)
        sent = 0
        handle.progress(0, total)
        for start in range(0, total, self._chunk_bytes):
            chunk = data[start:start + self._chunk_bytes]
            yield chunk
            # the transport has taken the chunk by the time we resume
            sent += len(chunk)
            handle.progress(sent, total)

    async def _stream_upload(self, handle: TransferHandle, data: bytes, path: str, content_type: str) -> None:
        url = f"{self._base_url}/storage/v1/object/{quote(self._bucket)}/{quote(path, safe='/')}"
        headers = {
            "Authorization": f"Bearer {self._key}",
            "apikey": self._key,
            "Content-Type": content_type or "application/octet-stream",
            "Content-Length": str(len(data)),
            "x-upsert": "false",
            "cache-control": "max-age=3600",
        }

        try:
            if self._http is not None:
                resp = await self._http.post(url, content=self._chunks(handle, data), headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as http:
                    resp = await http.post(url, content=self._chunks(handle, data), headers=headers)
        except httpx.HTTPError as e:
            logger.warning("storage.upload_transport_error", extra={"path": path, "error": str(e)})
            handle.fail(str(e) or ErrorReason.UPLOAD_FAILED.value)
            return
        except Exception as e:
            # the handle must always terminate, or the session waits forever
            logger.exception("storage.upload_crashed", extra={"path": path})
            handle.fail(str(e) or ErrorReason.UPLOAD_FAILED.value)
            return

        if resp.is_error:
            message = _error_message(resp)
            logger.warning(
                "storage.upload_rejected",
                extra={"path": path, "status_code": resp.status_code, "error": message},
            )
            handle.fail(message)
            return

        handle.succeed(path)

    # ---------- durable reference ----------

    async def resolve_reference(self, final_location: str) -> str:
        """
        Turn an uploaded object path into its public URL.
        """
        try:
            res = await asyncio.to_thread(self._client.storage.from_(self._bucket).get_public_url, final_location)
        except Exception as e:
            raise transfer_error(
                ErrorReason.RESOLVE_FAILED.value,
                reason=ErrorReason.RESOLVE_FAILED,
                code=ErrorCode.STORAGE_RESOLVE_FAILED,
                details={"path": final_location},
            ) from e

        # Client versions differ: plain string or dict with publicUrl
        url: str | None = None
        if isinstance(res, str):
            url = res
        elif isinstance(res, dict):
            url = res.get("publicUrl") or res.get("publicURL") or res.get("public_url")

        if not url:
            raise transfer_error(
                ErrorReason.RESOLVE_FAILED.value,
                reason=ErrorReason.RESOLVE_FAILED,
                code=ErrorCode.STORAGE_RESOLVE_FAILED,
                details={"path": final_location},
            )

        # some client versions append an empty query string
        return url.rstrip("?")

    # ---------- delete ----------

    async def delete_reference(self, reference: str) -> None:
        """Delete the object behind a public URL. Malformed URLs are never sent to storage."""
        try:
            obj = parse_object_reference(reference)
        except AppError:
            logger.warning("asset.delete_invalid_reference", extra={"reference": reference})
            raise

        try:
            await asyncio.to_thread(self._client.storage.from_(obj.bucket).remove, [obj.path])
        except Exception as e:
            raise AppError(
                code=ErrorCode.STORAGE_DELETE_FAILED,
                reason=ErrorReason.DELETE_FAILED,
                message=f"Failed to delete asset from storage: {e}",
                status_code=502,
                details={"bucket": obj.bucket, "path": obj.path},
            ) from e

        logger.info("asset.deleted", extra={"bucket": obj.bucket, "path": obj.path})
