import pytest

from app.core.errors import persistence_error, transfer_error
from app.core import ErrorCode, ErrorReason
from app.services.storage.supabase_storage import parse_object_reference
from app.services.storage.transfer import TransferHandle
from app.uploads.types import CandidateFile

PUBLIC_BASE = "https://proj.supabase.co/storage/v1/object/public/assets/"

MB = 1000 * 1000
MiB = 1024 * 1024


def make_file(size: int, content_type: str = "image/jpeg", name: str = "photo.jpg") -> CandidateFile:
    return CandidateFile.from_bytes(name, content_type, b"\xff" * size)


class ScriptedBlobStore:
    """
    Blob store fake. Each upload replays `script`:
    ("progress", pct) | ("succeed",) | ("fail", message) | ("hang",)
    """

    def __init__(self, script=None, *, resolve_error: bool = False, begin_error: Exception | None = None):
        self.script = script if script is not None else [("progress", 0), ("progress", 40), ("progress", 100), ("succeed",)]
        self.resolve_error = resolve_error
        self.begin_error = begin_error
        self.uploads: list[dict] = []
        self.deleted: list[str] = []
        self.handles: list[TransferHandle] = []

    def begin_upload(self, data: bytes, destination_path: str, content_type: str) -> TransferHandle:
        if self.begin_error is not None:
            raise self.begin_error
        self.uploads.append({"path": destination_path, "content_type": content_type, "size": len(data)})
        handle = TransferHandle()
        total = len(data)
        for step in self.script:
            kind = step[0]
            if kind == "progress":
                handle.progress(total * step[1] // 100, total)
            elif kind == "succeed":
                handle.succeed(destination_path)
            elif kind == "fail":
                handle.fail(step[1])
        self.handles.append(handle)
        return handle

    async def resolve_reference(self, final_location: str) -> str:
        if self.resolve_error:
            raise transfer_error(
                ErrorReason.RESOLVE_FAILED.value,
                reason=ErrorReason.RESOLVE_FAILED,
                code=ErrorCode.STORAGE_RESOLVE_FAILED,
            )
        return PUBLIC_BASE + final_location

    async def delete_reference(self, reference: str) -> None:
        obj = parse_object_reference(reference)
        self.deleted.append(obj.path)


class FakePersistence:
    def __init__(self, records: dict | None = None, *, fail_message: str | None = None):
        self.records = records or {}
        self.fail_message = fail_message
        self.calls: list[tuple] = []

    async def get(self, resource: str, entity_id: str) -> dict:
        self.calls.append(("get", resource, entity_id, None))
        record = self.records.get((resource, entity_id))
        if record is None:
            raise persistence_error("Record not found", status_code=404)
        return dict(record)

    async def create(self, resource: str, payload: dict) -> dict:
        self.calls.append(("create", resource, None, payload))
        if self.fail_message:
            raise persistence_error(self.fail_message)
        return {"id": "new-1", **payload}

    async def update(self, resource: str, entity_id: str, payload: dict) -> dict:
        self.calls.append(("update", resource, entity_id, payload))
        if self.fail_message:
            raise persistence_error(self.fail_message)
        return {"id": entity_id, **payload}

    @property
    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("create", "update")]


@pytest.fixture
def blob():
    return ScriptedBlobStore()


@pytest.fixture
def persistence():
    return FakePersistence(
        {
            ("/api/clients", "c1"): {
                "id": "c1",
                "fullName": "Asha Rao",
                "email": "asha@example.com",
                "phone": "98450",
                "profilePic": "https://x/y.jpg",
            },
            ("/api/users", "l1"): {
                "id": "l1",
                "fullName": "R. Mehta",
                "walletAmount": "0",
                "reviewCount": "3",
                "reviewSum": "14",
                "bio": "Advocate",
                "yearsOfExperience": 5,
                "specializations": ["Civil", "Family"],
                "courts": ["High Court"],
                "profilePic": "",
            },
            ("/api/news", "n1"): {
                "id": "n1",
                "title": "Old title",
                "description": "Body",
                "category": "CIVIL MATTERS",
                "imageUrl": "https://x/old.jpg",
                "views": 12,
            },
        }
    )
