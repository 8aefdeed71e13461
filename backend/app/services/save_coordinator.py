"""
save_coordinator.py
- Purpose: The save transaction for an entity form: upload first, persist second.
- Owns: ordering, merge of the uploaded reference, conversion of failures into SaveResult.
- Design: persistence is never called unless the upload feeding it succeeded.
  A failed persist after a good upload leaves the asset in storage (logged as
  asset.orphaned); there is no compensating delete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.core import AppError, ErrorReason
from app.core.errors import conflict, internal_error
from app.core.request_context import set_context
from app.forms.types import FieldUpdate
from app.services.forms import EntityForm
from app.services.persistence.api_client import PersistenceAPI
from app.uploads.types import UploadProgress

logger = logging.getLogger("app.save")


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    entity: dict[str, Any] | None = None
    error: AppError | None = None
    progress: UploadProgress | None = None

    @classmethod
    def success(cls, entity: dict[str, Any], progress: UploadProgress) -> "SaveResult":
        return cls(ok=True, entity=entity, progress=progress)

    @classmethod
    def failure(cls, error: AppError, progress: UploadProgress) -> "SaveResult":
        return cls(ok=False, error=error, progress=progress)


class SaveCoordinator:
    def __init__(self, persistence: PersistenceAPI):
        self.persistence = persistence

    async def submit(self, form: EntityForm) -> SaveResult:
        if form.saving:
            return SaveResult.failure(conflict(ErrorReason.SAVE_IN_PROGRESS), form.assets.progress)

        form.saving = True
        try:
            return await self._submit(form)
        finally:
            form.saving = False

    async def _submit(self, form: EntityForm) -> SaveResult:
        definition = form.definition
        set_context(entity=definition.name, entity_id=form.draft.entity_id)

        # ---------- Step 1: required fields (no network) ----------
        try:
            definition.check_required(form.draft, form.assets)
        except AppError as e:
            logger.info("save.invalid", extra={"error": str(e)})
            return SaveResult.failure(e, form.assets.progress)

        # ---------- Step 2: upload pending file ----------
        uploaded: str | None = None
        if form.assets.pending_file is not None:
            try:
                uploaded = await form.assets.upload(definition.category)
            except AppError as e:
                logger.warning("save.aborted_upload", extra={"error": str(e), "error_type": type(e).__name__})
                return SaveResult.failure(e, form.assets.progress)

            # ---------- Step 3: merge the resolved reference as-is ----------
            form.draft = form.draft.apply(FieldUpdate(definition.asset_field, uploaded))

        # ---------- Step 4: persist ----------
        try:
            payload = definition.build_payload(form.draft)
        except AppError as e:
            return SaveResult.failure(e, form.assets.progress)

        try:
            if form.is_create:
                entity = await self.persistence.create(definition.resource, payload)
            else:
                entity = await self.persistence.update(definition.resource, form.draft.entity_id, payload)
        except AppError as e:
            if uploaded:
                logger.warning("asset.orphaned", extra={"reference": uploaded})
            logger.warning("save.failed", extra={"error": str(e)})
            return SaveResult.failure(e, form.assets.progress)
        except Exception:
            logger.exception("save.crashed")
            return SaveResult.failure(internal_error(ErrorReason.PERSISTENCE_FAILED), form.assets.progress)

        # ---------- Step 5: done ----------
        logger.info("save.persisted", extra={"uploaded": bool(uploaded)})
        return SaveResult.success(entity, form.assets.progress)
