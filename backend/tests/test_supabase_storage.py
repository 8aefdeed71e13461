import httpx
import pytest

from app.core import AppError, ReferenceParseError
from app.services.storage.paths import build_destination_path, sanitize_filename
from app.services.storage.supabase_storage import SupabaseStorage, StoredObject, parse_object_reference
from app.services.storage.transfer import TransferFailed, TransferProgress, TransferSucceeded

BASE = "https://proj.supabase.co"


class FakeBucket:
    def __init__(self, client, bucket):
        self.client = client
        self.bucket = bucket

    def get_public_url(self, path):
        return f"{BASE}/storage/v1/object/public/{self.bucket}/{path}?"

    def remove(self, paths):
        if self.client.remove_error:
            raise RuntimeError(self.client.remove_error)
        self.client.removed.append((self.bucket, list(paths)))
        return [{"name": p} for p in paths]


class FakeStorageApi:
    def __init__(self, client):
        self.client = client

    def from_(self, bucket):
        return FakeBucket(self.client, bucket)


class FakeSupabase:
    def __init__(self, remove_error=None):
        self.removed = []
        self.remove_error = remove_error
        self.storage = FakeStorageApi(self)


def _storage(handler=None, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler)) if handler else None
    return SupabaseStorage(
        "assets",
        client=FakeSupabase(**kwargs),
        http=http,
        base_url=BASE,
        service_key="service-key",
        chunk_bytes=1024,
    )


def test_sanitize_and_destination_path():
    assert sanitize_filename("My Photo (final).v2.JPG") == "My_Photo__final_.v2.JPG"
    assert build_destination_path("news", "a b.png", timestamp_ms=42) == "news/42_a_b.png"


def test_parse_public_reference():
    url = f"{BASE}/storage/v1/object/public/assets/news/42_a%20b.png?t=1"
    assert parse_object_reference(url) == StoredObject(bucket="assets", path="news/42_a b.png")


@pytest.mark.parametrize(
    "reference",
    [
        "",
        "not a url",
        "https://x/y.jpg",
        f"{BASE}/storage/v1/object/public/assets",
        f"{BASE}/storage/v1/object/public/assets/",
        "ftp://proj/storage/v1/object/public/assets/a.png",
    ],
)
def test_malformed_reference_is_rejected(reference):
    with pytest.raises(ReferenceParseError) as exc:
        parse_object_reference(reference)
    assert exc.value.reason == "invalid reference"


@pytest.mark.asyncio
async def test_streamed_upload_reports_progress_then_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(200, json={"Key": "assets/news/1_a.png"})

    storage = _storage(handler)
    data = b"\x89PNG" + b"\x00" * 4092

    handle = storage.begin_upload(data, "news/1_a.png", "image/png")
    events = [event async for event in handle]

    assert seen["url"] == f"{BASE}/storage/v1/object/assets/news/1_a.png"
    assert seen["headers"]["x-upsert"] == "false"
    assert seen["headers"]["authorization"] == "Bearer service-key"
    assert seen["body"] == data
    progress = [e.percent for e in events if isinstance(e, TransferProgress)]
    assert progress == [0, 25, 50, 75, 100]
    assert events[-1] == TransferSucceeded("news/1_a.png")


@pytest.mark.asyncio
async def test_rejected_upload_surfaces_storage_message():
    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        return httpx.Response(400, json={"statusCode": "409", "error": "Duplicate", "message": "The resource already exists"})

    handle = _storage(handler).begin_upload(b"\x00" * 2048, "news/1_a.png", "image/png")
    events = [event async for event in handle]

    assert events[-1] == TransferFailed("The resource already exists")


@pytest.mark.asyncio
async def test_transport_error_fails_the_handle():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    handle = _storage(handler).begin_upload(b"\x00" * 2048, "news/1_a.png", "image/png")
    events = [event async for event in handle]

    assert events[-1] == TransferFailed("connection refused")


@pytest.mark.asyncio
async def test_resolve_reference_returns_clean_public_url():
    url = await _storage().resolve_reference("news/1_a.png")
    assert url == f"{BASE}/storage/v1/object/public/assets/news/1_a.png"


@pytest.mark.asyncio
async def test_delete_reference_removes_parsed_path():
    storage = _storage()
    await storage.delete_reference(f"{BASE}/storage/v1/object/public/assets/news/1_a.png")
    assert storage._client.removed == [("assets", ["news/1_a.png"])]


@pytest.mark.asyncio
async def test_delete_with_bad_reference_never_calls_storage():
    storage = _storage()
    with pytest.raises(ReferenceParseError):
        await storage.delete_reference("https://x/y.jpg")
    assert storage._client.removed == []


@pytest.mark.asyncio
async def test_delete_failure_is_reported():
    storage = _storage(remove_error="permission denied")
    with pytest.raises(AppError) as exc:
        await storage.delete_reference(f"{BASE}/storage/v1/object/public/assets/news/1_a.png")
    assert exc.value.status_code == 502
