# app/services/form_service.py
"""
form_service.py
- Purpose: Orchestrates the admin "edit/create entity with an image" workflow end-to-end.
- Owns: opening forms (load from API or empty defaults), applying submitted
  input, running the save transaction, asset validation/deletion endpoints.
- Design: Thick service; routers remain thin and easy to reason about.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.core import AppError, ErrorCode
from app.core.errors import not_found, validation_error
from app.core.request_context import set_context
from app.forms.types import FormDraft
from app.services.asset_store import AssetReferenceStore
from app.services.forms import FORMS, EntityForm, FormDefinition
from app.services.persistence.api_client import PersistenceAPI
from app.services.preview import generate_preview
from app.services.save_coordinator import SaveCoordinator, SaveResult
from app.services.storage.transfer import BlobTransferService
from app.uploads.types import CandidateFile, FileValidation
from app.validations.file_validators import rejection_error, validate_image_file

logger = logging.getLogger("app.form_service")


@dataclass
class FormSubmission:
    """Raw input of one multipart submit, before it touches the form."""

    values: dict[str, Any] = field(default_factory=dict)
    lists: dict[str, str] = field(default_factory=dict)
    file: CandidateFile | None = None
    manual_reference: str | None = None
    remove_asset: bool = False


class FormService:
    def __init__(self, persistence: PersistenceAPI, storage: BlobTransferService):
        self.persistence = persistence
        self.storage = storage
        self.coordinator = SaveCoordinator(persistence)

    def _definition(self, name: str) -> FormDefinition:
        definition = FORMS.get(name)
        if definition is None:
            raise not_found(details={"form": name})
        return definition

    def _build(self, definition: FormDefinition, values: Mapping[str, Any], entity_id: str | None) -> EntityForm:
        draft = FormDraft.create(values, entity_id=entity_id, list_fields=definition.list_fields)
        return EntityForm(definition, draft, AssetReferenceStore(self.storage))

    def open_create(self, name: str) -> EntityForm:
        definition = self._definition(name)
        if not definition.allow_create:
            raise validation_error(message=f"{definition.name} records cannot be created here")
        set_context(entity=definition.name)
        return self._build(definition, definition.defaults(), None)

    async def open_edit(self, name: str, entity_id: str) -> EntityForm:
        definition = self._definition(name)
        set_context(entity=definition.name, entity_id=entity_id)

        record = await self.persistence.get(definition.resource, entity_id)
        values = {**definition.defaults(), **record}
        return self._build(definition, values, entity_id)

    async def apply_submission(self, form: EntityForm, submission: FormSubmission) -> EntityForm:
        if submission.file is not None and submission.manual_reference:
            raise validation_error(
                code=ErrorCode.AMBIGUOUS_ASSET_SOURCE,
                message="Send either an image file or an image URL, not both",
            )

        form.update_many(submission.values)
        for name, raw in submission.lists.items():
            form.edit_list(name, raw)

        if submission.remove_asset:
            form.remove_asset()
        if submission.manual_reference is not None:
            form.set_manual_reference(submission.manual_reference)
        if submission.file is not None:
            result = await form.assets.select_file(submission.file)
            if not result.valid:
                raise rejection_error(result, submission.file)
        return form

    async def save(self, form: EntityForm) -> SaveResult:
        result = await self.coordinator.submit(form)
        if not result.ok and result.error is not None:
            raise result.error
        return result

    async def submit(self, form: EntityForm, submission: FormSubmission) -> SaveResult:
        await self.apply_submission(form, submission)
        return await self.save(form)

    # ---------- standalone asset operations ----------

    async def check_selection(self, file: CandidateFile) -> tuple[FileValidation, str | None]:
        """Selection-time check plus a local preview; nothing leaves the process."""
        result = validate_image_file(file)
        preview = await generate_preview(file) if result.valid else None
        return result, preview

    async def delete_asset(self, reference: str) -> None:
        try:
            await self.storage.delete_reference(reference)
        except AppError:
            logger.warning("asset.delete_failed", extra={"reference": reference})
            raise
