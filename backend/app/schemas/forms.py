"""
forms.py (schemas)
- Purpose: Response DTOs for the admin entity forms and asset endpoints.
- Design: Keep API DTOs stable; include helper constructors for DRY mapping.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.uploads.types import FileValidation, UploadProgress


class UploadProgressOut(BaseModel):
    percent_complete: int = Field(ge=0, le=100)
    is_active: bool
    last_error: Optional[str] = None

    @classmethod
    def from_progress(cls, progress: UploadProgress | None) -> "UploadProgressOut":
        progress = progress or UploadProgress()
        return cls(**progress.to_dict())


class SaveResponse(BaseModel):
    """
    API response after a successful save. `upload` is the final progress snapshot.
    """
    entity: dict[str, Any]
    upload: UploadProgressOut

    @classmethod
    def from_result(cls, result) -> "SaveResponse":
        """
        DRY mapper from SaveResult -> response DTO.
        """
        return cls(
            entity=result.entity or {},
            upload=UploadProgressOut.from_progress(result.progress),
        )


class AssetCheckResponse(BaseModel):
    valid: bool
    reason: Optional[str] = None
    preview: Optional[str] = None

    @classmethod
    def from_validation(cls, result: FileValidation, preview: str | None) -> "AssetCheckResponse":
        return cls(valid=result.valid, reason=result.reason, preview=preview)
