"""
statuses.py
- Purpose: Central source of truth for upload session states and asset sources.
- Design: Keep FE-facing values stable and explicit.
"""

from enum import Enum


class UploadState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    TRANSFERRING = "TRANSFERRING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REJECTED = "REJECTED"


class AssetSource(str, Enum):
    PERSISTED = "PERSISTED"
    MANUAL = "MANUAL"
    UPLOADED = "UPLOADED"
