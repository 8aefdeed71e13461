"""
api_client.py
- Purpose: Thin async client for the REST API that owns the entity records.
- Owns: URL building, auth header, error-message extraction.
- Design: Infrastructure adapter; every failure becomes PersistenceError.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.core.errors import PersistenceError, persistence_error

logger = logging.getLogger("app.persistence")


def _message_from(resp: httpx.Response) -> str:
    fallback = f"HTTP {resp.status_code}"
    content_type = resp.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = resp.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return str(body.get("error") or body.get("message") or fallback)
        if isinstance(body, str) and body:
            return body
        return fallback
    return resp.text or fallback


class PersistenceAPI:
    def __init__(self, client: httpx.AsyncClient, *, token: str | None = None):
        self._client = client
        self._token = token if token is not None else settings.PERSISTENCE_API_TOKEN

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("persistence.transport_error", extra={"method": method, "path": path, "error": str(e)})
            raise persistence_error(str(e) or "Failed to reach the API", details={"path": path}) from e

        if resp.is_error:
            message = _message_from(resp)
            logger.warning(
                "persistence.http_error",
                extra={"method": method, "path": path, "status_code": resp.status_code, "error": message},
            )
            # upstream 4xx keeps its status so the admin sees e.g. 404 vs 502
            status = resp.status_code if 400 <= resp.status_code < 500 else 502
            raise persistence_error(message, status_code=status, details={"path": path, "upstream_status": resp.status_code})

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            payload = resp.json()
        except ValueError as e:
            raise persistence_error("API returned a non-JSON response", details={"path": path}) from e

        # responses are {success, data}; older endpoints return the record directly
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    @staticmethod
    def _item_path(resource: str, entity_id: str) -> str:
        return f"{resource}/{quote(str(entity_id), safe='')}"

    async def get(self, resource: str, entity_id: str) -> dict[str, Any]:
        data = await self._request("GET", self._item_path(resource, entity_id))
        if not isinstance(data, dict):
            raise persistence_error("Record not found", status_code=404, details={"resource": resource, "id": entity_id})
        return data

    async def create(self, resource: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", resource, payload) or {}

    async def update(self, resource: str, entity_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", self._item_path(resource, entity_id), payload) or {}


def build_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.PERSISTENCE_API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


__all__ = ["PersistenceAPI", "PersistenceError", "build_http_client"]
