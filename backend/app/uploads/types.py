"""app/uploads/types.py

Value types for the asset upload flow.
Design goals:
- the session state is an explicit tagged variant (one dataclass per state)
- progress is an immutable snapshot, replaced on every update
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from app.constants.statuses import UploadState


@dataclass(frozen=True)
class CandidateFile:
    """A locally selected file that has not been uploaded yet."""

    filename: str
    content_type: str
    size_bytes: int
    data: bytes = b""

    @classmethod
    def from_bytes(cls, filename: str, content_type: str, data: bytes) -> "CandidateFile":
        return cls(
            filename=filename,
            content_type=content_type,
            size_bytes=len(data),
            data=data,
        )


@dataclass(frozen=True)
class FileValidation:
    valid: bool
    reason: str | None = None


@dataclass(frozen=True)
class UploadProgress:
    percent_complete: int = 0
    is_active: bool = False
    last_error: str | None = None

    def to_dict(self) -> dict:
        return {
            "percent_complete": self.percent_complete,
            "is_active": self.is_active,
            "last_error": self.last_error,
        }


IDLE_PROGRESS = UploadProgress()


# ---------- Session states ----------

@dataclass(frozen=True)
class Idle:
    state = UploadState.IDLE


@dataclass(frozen=True)
class Validating:
    file: CandidateFile
    state = UploadState.VALIDATING


@dataclass(frozen=True)
class Transferring:
    destination_path: str
    percent: int = 0
    state = UploadState.TRANSFERRING


@dataclass(frozen=True)
class Succeeded:
    reference: str
    state = UploadState.SUCCEEDED


@dataclass(frozen=True)
class Failed:
    error: str
    percent: int = 0
    state = UploadState.FAILED


@dataclass(frozen=True)
class Rejected:
    reason: str
    state = UploadState.REJECTED


SessionState = Union[Idle, Validating, Transferring, Succeeded, Failed, Rejected]
