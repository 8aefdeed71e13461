"""
Request/form context helpers.

We keep a small context (request_id, entity, entity_id, upload_path) in
ContextVars. The HTTP middleware and the save flow set these values so logs
from the router, the upload session and the persistence client correlate.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_entity: ContextVar[Optional[str]] = ContextVar("entity", default=None)
_entity_id: ContextVar[Optional[str]] = ContextVar("entity_id", default=None)
_upload_path: ContextVar[Optional[str]] = ContextVar("upload_path", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    entity: Optional[str] = None,
    entity_id: Optional[str] = None,
    upload_path: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if entity is not None:
        _entity.set(entity)
    if entity_id is not None:
        _entity_id.set(entity_id)
    if upload_path is not None:
        _upload_path.set(upload_path)


def clear_context() -> None:
    _request_id.set(None)
    _entity.set(None)
    _entity_id.set(None)
    _upload_path.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    entity = _entity.get()
    eid = _entity_id.get()
    path = _upload_path.get()

    if rid:
        ctx["request_id"] = rid
    if entity:
        ctx["entity"] = entity
    if eid:
        ctx["entity_id"] = eid
    if path:
        ctx["upload_path"] = path
    return ctx
