"""
upload_session.py
- Purpose: Drive one candidate file through validation -> transfer -> reference.
- Owns: the session state machine and the UploadProgress it publishes.
- Design: Single attempt. Every failure ends in a terminal state instead of
  escaping as an exception; the caller decides what to surface.

States:
Idle -> Validating -> Transferring -> Succeeded
Idle -> Validating -> Rejected
Transferring -> Failed
"""

from __future__ import annotations

import logging
from typing import Callable

from app.core import AppError, ErrorReason
from app.core.errors import conflict
from app.core.request_context import set_context
from app.services.storage.paths import build_destination_path, now_ms
from app.services.storage.transfer import (
    BlobTransferService,
    TransferFailed,
    TransferHandle,
    TransferProgress,
    TransferSucceeded,
)
from app.uploads.types import (
    IDLE_PROGRESS,
    CandidateFile,
    Failed,
    Idle,
    Rejected,
    SessionState,
    Succeeded,
    Transferring,
    UploadProgress,
    Validating,
)
from app.validations.file_validators import validate_image_file

logger = logging.getLogger("app.upload_session")

ProgressListener = Callable[[UploadProgress], None]


class UploadSession:
    def __init__(
        self,
        blob: BlobTransferService,
        *,
        on_progress: ProgressListener | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._blob = blob
        self._listeners: list[ProgressListener] = [on_progress] if on_progress else []
        self._clock = clock

        self._state: SessionState = Idle()
        self._progress: UploadProgress = IDLE_PROGRESS
        self._handle: TransferHandle | None = None
        self._started = False
        self._discarded = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def progress(self) -> UploadProgress:
        return self._progress

    @property
    def is_transferring(self) -> bool:
        return isinstance(self._state, Transferring)

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def _publish(self, progress: UploadProgress) -> None:
        self._progress = progress
        for listener in self._listeners:
            listener(progress)

    async def run(self, file: CandidateFile, category: str) -> SessionState:
        if self._started:
            raise conflict("Upload session already used", details={"state": self._state.state.value})
        self._started = True

        # ---------- Validating ----------
        self._state = Validating(file=file)
        result = validate_image_file(file, at_upload=True)
        if not result.valid:
            reason = result.reason or ErrorReason.INVALID_INPUT.value
            self._state = Rejected(reason=reason)
            self._publish(UploadProgress(0, False, reason))
            logger.info(
                "upload.rejected",
                extra={"file_name": file.filename, "size_bytes": file.size_bytes, "reason": reason},
            )
            return self._state

        # ---------- Transferring ----------
        path = build_destination_path(category, file.filename, timestamp_ms=self._clock())
        set_context(upload_path=path)
        self._state = Transferring(destination_path=path, percent=0)
        self._publish(UploadProgress(0, True, None))
        logger.info("upload.started", extra={"size_bytes": file.size_bytes, "content_type": file.content_type})

        final_location: str | None = None
        try:
            self._handle = self._blob.begin_upload(file.data, path, file.content_type)
            async for event in self._handle:
                if self._discarded:
                    return self._state
                if isinstance(event, TransferProgress):
                    self._advance(path, event.percent)
                elif isinstance(event, TransferSucceeded):
                    final_location = event.final_location
                elif isinstance(event, TransferFailed):
                    return self._fail(event.error)
        except AppError as e:
            return self._fail(str(e))
        except Exception as e:
            logger.exception("upload.transport_crashed")
            return self._fail(str(e))

        if self._discarded:
            return self._state
        if final_location is None:
            return self._fail(ErrorReason.UPLOAD_FAILED.value)

        # ---------- Durable reference ----------
        try:
            reference = await self._blob.resolve_reference(final_location)
        except AppError as e:
            return self._fail(str(e))
        except Exception as e:
            logger.exception("upload.resolve_crashed")
            return self._fail(str(e) or ErrorReason.RESOLVE_FAILED.value)

        if self._discarded:
            return self._state

        self._state = Succeeded(reference=reference)
        self._publish(UploadProgress(100, False, None))
        logger.info("upload.succeeded", extra={"reference": reference})
        return self._state

    def _advance(self, path: str, percent: int) -> None:
        # progress never goes backwards within one session
        current = self._state.percent if isinstance(self._state, Transferring) else 0
        percent = max(current, percent)
        self._state = Transferring(destination_path=path, percent=percent)
        self._publish(UploadProgress(percent, True, None))

    def _fail(self, message: str | None) -> SessionState:
        message = message or ErrorReason.UPLOAD_FAILED.value
        last = self._state.percent if isinstance(self._state, Transferring) else self._progress.percent_complete
        self._state = Failed(error=message, percent=last)
        self._publish(UploadProgress(last, False, message))
        logger.warning("upload.failed", extra={"error": message, "percent": last})
        return self._state

    def discard(self) -> None:
        """
        Best-effort abandonment: stop consuming events and reset progress.
        A transfer already in flight may still complete on the remote side.
        """
        self._discarded = True
        if self._handle is not None:
            self._handle.abandon()
        self._state = Idle()
        self._publish(IDLE_PROGRESS)
        logger.info("upload.discarded")
