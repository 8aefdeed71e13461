"""
asset_store.py
- Purpose: Per-form holder of "which asset will the next save use".
- Owns: the current asset (none / referenced / pending file), the upload
  progress shown next to it, the local preview, and the live UploadSession.
- Design: Exactly one asset source is authoritative at a time. While a file is
  pending, manual reference edits are refused (the text control is disabled).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Union

from app.constants.statuses import AssetSource
from app.core import ErrorCode
from app.core.errors import conflict, transfer_error, validation_error
from app.services.preview import generate_preview
from app.services.storage.transfer import BlobTransferService
from app.services.upload_session import UploadSession
from app.uploads.types import (
    IDLE_PROGRESS,
    CandidateFile,
    FileValidation,
    Rejected,
    Succeeded,
    UploadProgress,
)
from app.validations.file_validators import rejection_error, validate_image_file

logger = logging.getLogger("app.asset_store")


@dataclass(frozen=True)
class NoAsset:
    pass


@dataclass(frozen=True)
class ReferencedAsset:
    reference: str
    source: AssetSource


@dataclass(frozen=True)
class PendingAsset:
    file: CandidateFile
    # what was on display before the file was picked; restored if the upload fails
    superseded: "ReferencedAsset | None" = None


AssetState = Union[NoAsset, ReferencedAsset, PendingAsset]


class AssetReferenceStore:
    def __init__(
        self,
        blob: BlobTransferService,
        *,
        session_factory: Callable[..., UploadSession] = UploadSession,
    ):
        self._blob = blob
        self._session_factory = session_factory

        self._asset: AssetState = NoAsset()
        self._progress: UploadProgress = IDLE_PROGRESS
        self._session: UploadSession | None = None
        self._preview: str | None = None
        self._preview_task: asyncio.Task | None = None

    # ---------- read-only views ----------

    @property
    def asset(self) -> AssetState:
        return self._asset

    @property
    def reference(self) -> str:
        return self._asset.reference if isinstance(self._asset, ReferencedAsset) else ""

    @property
    def pending_file(self) -> CandidateFile | None:
        return self._asset.file if isinstance(self._asset, PendingAsset) else None

    @property
    def progress(self) -> UploadProgress:
        return self._progress

    @property
    def preview(self) -> str | None:
        return self._preview

    @property
    def is_transferring(self) -> bool:
        return self._session is not None and self._session.is_transferring

    @property
    def manual_reference_editable(self) -> bool:
        return self.pending_file is None

    @property
    def file_input_enabled(self) -> bool:
        return not self.is_transferring

    # ---------- transitions ----------

    def _set_progress(self, progress: UploadProgress) -> None:
        self._progress = progress

    def load(self, reference: str | None) -> None:
        """Initial value from the persistence API (edit flow)."""
        ref = (reference or "").strip()
        self._asset = ReferencedAsset(ref, AssetSource.PERSISTED) if ref else NoAsset()

    async def select_file(self, file: CandidateFile) -> FileValidation:
        if self.is_transferring:
            raise conflict("File input is disabled while an upload is running")

        result = validate_image_file(file)
        if not result.valid:
            self._progress = UploadProgress(0, False, result.reason)
            logger.info("asset.selection_rejected", extra={"reason": result.reason, "file_name": file.filename})
            return result

        superseded = self._asset if isinstance(self._asset, ReferencedAsset) else None
        if isinstance(self._asset, PendingAsset):
            superseded = self._asset.superseded
        self._drop_session()

        self._asset = PendingAsset(file=file, superseded=superseded)
        self._progress = IDLE_PROGRESS
        self._session = self._session_factory(self._blob, on_progress=self._set_progress)
        self._preview = None
        self._preview_task = asyncio.create_task(self._render_preview(file))
        return result

    async def _render_preview(self, file: CandidateFile) -> None:
        preview = await generate_preview(file)
        # a newer selection or a removal wins
        if self.pending_file is file:
            self._preview = preview

    async def preview_ready(self) -> str | None:
        if self._preview_task is not None:
            await asyncio.shield(self._preview_task)
        return self._preview

    def remove_selection(self) -> None:
        """Clear the pending file and any displayed reference. Nothing is deleted remotely."""
        self._drop_session()
        self._asset = NoAsset()
        self._progress = IDLE_PROGRESS
        self._preview = None

    def set_manual_reference(self, text: str | None) -> None:
        if self.pending_file is not None:
            raise validation_error(
                code=ErrorCode.AMBIGUOUS_ASSET_SOURCE,
                message="Remove the selected file before entering a reference manually",
            )
        ref = (text or "").strip()
        self._asset = ReferencedAsset(ref, AssetSource.MANUAL) if ref else NoAsset()

    async def upload(self, category: str) -> str:
        """
        Transfer the pending file. Returns the resolved reference, or raises
        ValidationError (rejected) / TransferError (failed). Either failure drops
        the pending file; the user has to pick it again to retry.
        """
        pending = self._asset
        if not isinstance(pending, PendingAsset) or self._session is None:
            raise validation_error(code=ErrorCode.FILE_MISSING, message="No file selected")

        session = self._session
        outcome = await session.run(pending.file, category)

        if isinstance(outcome, Succeeded):
            self._asset = ReferencedAsset(outcome.reference, AssetSource.UPLOADED)
            self._session = None
            return outcome.reference

        if self._session is not session:
            # removed or replaced while the transfer was running
            raise transfer_error("Upload was abandoned")

        self._asset = pending.superseded or NoAsset()
        self._session = None
        self._preview = None

        if isinstance(outcome, Rejected):
            raise rejection_error(FileValidation(valid=False, reason=outcome.reason), pending.file)
        raise transfer_error(self._progress.last_error)

    def _drop_session(self) -> None:
        if self._session is not None:
            self._session.discard()
            self._session = None
        if self._preview_task is not None and not self._preview_task.done():
            self._preview_task.cancel()
        self._preview_task = None
