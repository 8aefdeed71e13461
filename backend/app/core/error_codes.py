# app/core/error_codes.py
from enum import Enum

class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CONFIG_ERROR = "CONFIG_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Asset selection / upload
    FILE_MISSING = "FILE_MISSING"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    FILE_EMPTY = "FILE_EMPTY"
    AMBIGUOUS_ASSET_SOURCE = "AMBIGUOUS_ASSET_SOURCE"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"

    # Supabase / Storage
    STORAGE_UPLOAD_FAILED = "STORAGE_UPLOAD_FAILED"
    STORAGE_RESOLVE_FAILED = "STORAGE_RESOLVE_FAILED"
    STORAGE_DELETE_FAILED = "STORAGE_DELETE_FAILED"
    INVALID_REFERENCE = "INVALID_REFERENCE"

    # Persistence API
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
