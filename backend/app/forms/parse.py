"""app/forms/parse.py

Pure helpers for comma-separated list fields (specializations, courts, ...).
"""

from typing import Iterable


def parse_list_text(raw: str | None) -> tuple[str, ...]:
    """
    Split on commas, trim, drop empties, keep the first occurrence of each item
    in the order typed.
    """
    seen: set[str] = set()
    items: list[str] = []
    for part in (raw or "").split(","):
        item = part.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        items.append(item)
    return tuple(items)


def to_list_text(items: Iterable[str] | None) -> str:
    return ", ".join(items or ())
