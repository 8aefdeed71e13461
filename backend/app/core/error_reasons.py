"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they may be surfaced in the admin UI.
"""

from enum import Enum


class ErrorReason(str, Enum):
    UNKNOWN = "Unknown error"

    INVALID_INPUT = "Invalid input"
    RESOURCE_NOT_FOUND = "Resource not found"
    ALREADY_EXISTS = "Resource already exists"
    SAVE_IN_PROGRESS = "Save already in progress"

    # File rules (selection + upload time)
    NOT_AN_IMAGE = "not an image type"
    EXCEEDS_MAX_SIZE = "exceeds maximum size"
    EMPTY_OR_CORRUPTED = "file is empty or corrupted"

    UPLOAD_FAILED = "Upload failed"
    RESOLVE_FAILED = "Failed to get download URL"
    DELETE_FAILED = "Failed to delete asset"
    INVALID_REFERENCE = "invalid reference"

    PERSISTENCE_FAILED = "Failed to save"
    MISSING_DEPENDENCY = "Missing dependency"
