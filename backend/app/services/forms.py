"""
forms.py
- Purpose: Entity form definitions (client, lawyer, news) and the live form
  instance that pairs an immutable draft with its asset store.
- Design: Definitions are data + two hooks (required checks, payload builder);
  the save transaction itself lives in SaveCoordinator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from app.forms.types import FieldUpdate, FormDraft, ListFieldEdit
from app.services.asset_store import AssetReferenceStore
from app.validations.form_validators import coerce_int, coerce_str, require_asset, require_fields

RequiredCheck = Callable[[FormDraft, AssetReferenceStore], None]
PayloadBuilder = Callable[[FormDraft], dict[str, Any]]


@dataclass(frozen=True)
class FormDefinition:
    name: str
    resource: str           # persistence API collection path, e.g. "/api/news"
    category: str           # storage folder for uploaded assets
    asset_field: str
    fields: tuple[str, ...]
    list_fields: tuple[str, ...] = ()
    allow_create: bool = False
    check_required: RequiredCheck = lambda draft, assets: None
    build_payload: PayloadBuilder = lambda draft: dict(draft.values)

    def defaults(self) -> dict[str, Any]:
        return {name: "" for name in self.fields}


# ---------- client ----------

def _check_client(draft: FormDraft, assets: AssetReferenceStore) -> None:
    require_fields(
        draft.values,
        [
            ("fullName", "Please enter the full name"),
            ("email", "Please enter an email address"),
        ],
    )


def _client_payload(draft: FormDraft) -> dict[str, Any]:
    return {
        "fullName": draft.get("fullName") or "",
        "email": draft.get("email") or "",
        "phone": draft.get("phone") or "",
        "profilePic": draft.get("profilePic") or "",
    }


CLIENT_FORM = FormDefinition(
    name="client",
    resource="/api/clients",
    category="clients",
    asset_field="profilePic",
    fields=("fullName", "email", "phone", "profilePic"),
    check_required=_check_client,
    build_payload=_client_payload,
)


# ---------- lawyer ----------

LAWYER_LIST_FIELDS = ("specializations", "services", "courts", "languages")


def _lawyer_payload(draft: FormDraft) -> dict[str, Any]:
    # full-record PUT: carry every loaded field, then normalize
    payload: dict[str, Any] = dict(draft.values)
    payload.update(
        {
            "yearsOfExperience": coerce_int(draft.get("yearsOfExperience")),
            "reviewCount": coerce_str(draft.get("reviewCount")),
            "reviewSum": coerce_str(draft.get("reviewSum")),
            "walletAmount": coerce_str(draft.get("walletAmount")),
        }
    )
    payload.update(draft.normalized_lists())
    return payload


LAWYER_FORM = FormDefinition(
    name="lawyer",
    resource="/api/users",
    category="lawyers",
    asset_field="profilePic",
    fields=(
        "fullName",
        "email",
        "phoneNumber",
        "bio",
        "city",
        "state",
        "completeAddress",
        "gender",
        "yearsOfExperience",
        "profilePic",
    ),
    list_fields=LAWYER_LIST_FIELDS,
    build_payload=_lawyer_payload,
)


# ---------- news ----------

def _check_news(draft: FormDraft, assets: AssetReferenceStore) -> None:
    require_fields(
        draft.values,
        [
            ("title", "Please enter a title"),
            ("description", "Please enter the article content"),
            ("category", "Please select a category"),
        ],
    )
    require_asset(
        assets.pending_file is not None,
        assets.reference,
        "Please select an image file or provide an image URL",
        field="imageUrl",
    )


def _news_payload(draft: FormDraft) -> dict[str, Any]:
    return {
        "title": draft.get("title") or "",
        "imageUrl": draft.get("imageUrl") or "",
        "description": draft.get("description") or "",
        "brief": draft.get("brief") or "",
        "source": draft.get("source") or "",
        "liveLink": draft.get("liveLink") or "",
        "category": draft.get("category") or "",
        "views": coerce_int(draft.get("views")),
        "isTrending": bool(draft.get("isTrending")),
        "published": bool(draft.get("published")),
    }


NEWS_FORM = FormDefinition(
    name="news",
    resource="/api/news",
    category="news",
    asset_field="imageUrl",
    fields=("title", "imageUrl", "description", "brief", "source", "liveLink", "category"),
    allow_create=True,
    check_required=_check_news,
    build_payload=_news_payload,
)


FORMS: dict[str, FormDefinition] = {f.name: f for f in (CLIENT_FORM, LAWYER_FORM, NEWS_FORM)}


class EntityForm:
    """
    One open create/edit form. Owns its draft and asset store exclusively.
    The asset field in the draft is kept in step with the store.
    """

    def __init__(self, definition: FormDefinition, draft: FormDraft, assets: AssetReferenceStore):
        self.definition = definition
        self.draft = draft
        self.assets = assets
        self.saving = False
        assets.load(draft.get(definition.asset_field))

    @property
    def is_create(self) -> bool:
        return self.draft.entity_id is None

    def update(self, field: str, value: Any) -> FormDraft:
        if field == self.definition.asset_field:
            self.set_manual_reference(value)
            return self.draft
        self.draft = self.draft.apply(FieldUpdate(field, value))
        return self.draft

    def update_many(self, values: Mapping[str, Any]) -> FormDraft:
        for field, value in values.items():
            self.update(field, value)
        return self.draft

    def edit_list(self, field: str, raw: str) -> FormDraft:
        self.draft = self.draft.apply(ListFieldEdit(field, raw))
        return self.draft

    def set_manual_reference(self, text: str | None) -> None:
        self.assets.set_manual_reference(text)
        self._sync_asset_field()

    def remove_asset(self) -> None:
        self.assets.remove_selection()
        self._sync_asset_field()

    def _sync_asset_field(self) -> None:
        self.draft = self.draft.apply(FieldUpdate(self.definition.asset_field, self.assets.reference))
