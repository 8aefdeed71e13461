"""app/forms/types.py

Immutable form draft + the update messages applied to it.
Every mutation returns a new FormDraft so each edit can be checked in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from app.forms.parse import parse_list_text, to_list_text


@dataclass(frozen=True)
class ListFieldBuffer:
    raw: str = ""
    parsed: tuple[str, ...] = ()

    @classmethod
    def from_items(cls, items: Iterable[str] | None) -> "ListFieldBuffer":
        raw = to_list_text(items)
        return cls(raw=raw, parsed=parse_list_text(raw))

    def edit(self, raw: str) -> "ListFieldBuffer":
        return ListFieldBuffer(raw=raw, parsed=parse_list_text(raw))


@dataclass(frozen=True)
class FieldUpdate:
    field: str
    value: Any


@dataclass(frozen=True)
class ListFieldEdit:
    field: str
    raw: str


DraftUpdate = Union[FieldUpdate, ListFieldEdit]


def _freeze(values: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class FormDraft:
    entity_id: str | None = None
    values: Mapping[str, Any] = field(default_factory=lambda: _freeze({}))
    lists: Mapping[str, ListFieldBuffer] = field(default_factory=lambda: _freeze({}))

    @classmethod
    def create(
        cls,
        values: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
        list_fields: Iterable[str] = (),
    ) -> "FormDraft":
        """Build a draft, moving list fields out of `values` into edit buffers."""
        plain = dict(values or {})
        lists = {name: ListFieldBuffer.from_items(plain.pop(name, None)) for name in list_fields}
        return cls(entity_id=entity_id, values=_freeze(plain), lists=_freeze(lists))

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def apply(self, update: DraftUpdate) -> "FormDraft":
        if isinstance(update, ListFieldEdit):
            if update.field not in self.lists:
                raise KeyError(f"{update.field} is not a list field")
            lists = dict(self.lists)
            lists[update.field] = lists[update.field].edit(update.raw)
            return replace(self, lists=_freeze(lists))

        if update.field in self.lists:
            raise KeyError(f"{update.field} is a list field; use ListFieldEdit")
        values = dict(self.values)
        values[update.field] = update.value
        return replace(self, values=_freeze(values))

    def apply_all(self, updates: Iterable[DraftUpdate]) -> "FormDraft":
        draft = self
        for update in updates:
            draft = draft.apply(update)
        return draft

    def normalized_lists(self) -> dict[str, list[str]]:
        return {name: list(buf.parsed) for name, buf in self.lists.items()}
