"""
file_validators.py
- Purpose: Centralized validation for image asset selection and upload.
- Design: Pure predicates returning FileValidation; callers decide whether to raise.

Rules run in order and the first failure wins. The minimum-size rule only
applies at upload time so a user still sees a preview of a tiny file at
selection.
"""

from fastapi import UploadFile

from app.core import ErrorCode, ErrorReason
from app.core.config import settings
from app.core.errors import ValidationError, validation_error
from app.uploads.types import CandidateFile, FileValidation

_REASON_CODES = {
    ErrorReason.NOT_AN_IMAGE.value: ErrorCode.INVALID_FILE_TYPE,
    ErrorReason.EXCEEDS_MAX_SIZE.value: ErrorCode.FILE_TOO_LARGE,
    ErrorReason.EMPTY_OR_CORRUPTED.value: ErrorCode.FILE_EMPTY,
}


def validate_image_file(
    file: CandidateFile,
    *,
    at_upload: bool = False,
    max_bytes: int | None = None,
    min_bytes: int | None = None,
) -> FileValidation:
    max_bytes = settings.ASSET_MAX_BYTES if max_bytes is None else max_bytes
    min_bytes = settings.ASSET_MIN_BYTES if min_bytes is None else min_bytes

    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        return FileValidation(valid=False, reason=ErrorReason.NOT_AN_IMAGE.value)

    if file.size_bytes > max_bytes:
        return FileValidation(valid=False, reason=ErrorReason.EXCEEDS_MAX_SIZE.value)

    if at_upload and file.size_bytes < min_bytes:
        return FileValidation(valid=False, reason=ErrorReason.EMPTY_OR_CORRUPTED.value)

    return FileValidation(valid=True)


def rejection_error(result: FileValidation, file: CandidateFile) -> ValidationError:
    """Map a failed FileValidation onto a ValidationError with a stable code."""
    return validation_error(
        result.reason or ErrorReason.INVALID_INPUT,
        code=_REASON_CODES.get(result.reason or "", ErrorCode.VALIDATION_ERROR),
        details={
            "filename": file.filename,
            "content_type": file.content_type,
            "size_bytes": file.size_bytes,
        },
    )


async def candidate_from_upload(upload: UploadFile | None) -> CandidateFile | None:
    """Read a multipart UploadFile into memory. Empty file fields count as absent."""
    if upload is None or not upload.filename:
        return None

    data = await upload.read()
    return CandidateFile.from_bytes(
        filename=upload.filename,
        content_type=upload.content_type or "",
        data=data,
    )
