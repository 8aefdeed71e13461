import json

import httpx
import pytest

from app.core import PersistenceError
from app.services.persistence.api_client import PersistenceAPI

BASE = "http://api.test"


def _api(handler, token="tok-1"):
    client = httpx.AsyncClient(base_url=BASE, transport=httpx.MockTransport(handler))
    return PersistenceAPI(client, token=token)


@pytest.mark.asyncio
async def test_update_sends_full_payload_and_unwraps_data():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"id": "c1", "fullName": "Asha"}})

    entity = await _api(handler).update("/api/clients", "c1", {"fullName": "Asha", "profilePic": "https://x/y.jpg"})

    assert seen["method"] == "PUT"
    assert seen["url"] == f"{BASE}/api/clients/c1"
    assert seen["auth"] == "Bearer tok-1"
    assert seen["body"] == {"fullName": "Asha", "profilePic": "https://x/y.jpg"}
    assert entity == {"id": "c1", "fullName": "Asha"}


@pytest.mark.asyncio
async def test_create_posts_to_collection():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/news"
        return httpx.Response(201, json={"data": {"id": "n9"}})

    assert await _api(handler).create("/api/news", {"title": "t"}) == {"id": "n9"}


@pytest.mark.asyncio
async def test_ids_are_path_escaped():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.raw_path == b"/api/users/a%2Fb"
        return httpx.Response(200, json={"data": {"id": "a/b"}})

    assert await _api(handler).get("/api/users", "a/b") == {"id": "a/b"}


@pytest.mark.asyncio
async def test_no_token_no_auth_header():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "authorization" not in request.headers
        return httpx.Response(200, json={"data": {"id": "c1"}})

    await _api(handler, token="").get("/api/clients", "c1")


@pytest.mark.asyncio
async def test_json_error_message_is_surfaced_with_upstream_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"success": False, "error": "Email already in use"})

    with pytest.raises(PersistenceError) as exc:
        await _api(handler).update("/api/clients", "c1", {})

    assert exc.value.message == "Email already in use"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_server_error_maps_to_bad_gateway():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="")

    with pytest.raises(PersistenceError) as exc:
        await _api(handler).create("/api/news", {})

    assert exc.value.message == "HTTP 500"
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_transport_failure_is_persistence_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PersistenceError) as exc:
        await _api(handler).update("/api/users", "l1", {})

    assert exc.value.message == "timed out"
