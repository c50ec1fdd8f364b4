"""Validation helpers shared by todo use cases."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from taskboard.utils import as_utc, utc_now

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
MAX_TAGS = 5
TAG_MAX_LENGTH = 20
BULK_MAX_IDS = 50
SEARCH_MAX_LENGTH = 100


def ensure_valid_title(title: str) -> str:
    normalized = (title or "").strip()
    if not normalized:
        raise ValueError("Title cannot be empty or just spaces")
    if len(normalized) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return normalized


def normalize_description(description: str | None) -> str | None:
    if description is None:
        return None
    normalized = description.strip()
    if len(normalized) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return normalized or None


def ensure_future_due_date(
    due_date: datetime | None, *, reference: datetime | None = None
) -> datetime | None:
    """Return ``due_date`` in UTC, rejecting moments that are not in the future."""

    if due_date is None:
        return None
    normalized = as_utc(due_date)
    if normalized <= (reference or utc_now()):
        raise ValueError("Due date must be in the future")
    return normalized


def normalize_tags(tags: Iterable[str] | str | None) -> list[str]:
    """Return trimmed tags, accepting a list or a comma separated string."""

    if tags is None:
        return []
    raw = tags.split(",") if isinstance(tags, str) else list(tags)
    normalized = [str(tag).strip() for tag in raw]
    normalized = [tag for tag in normalized if tag]
    if any(len(tag) > TAG_MAX_LENGTH for tag in normalized):
        raise ValueError(f"Each tag must be between 1-{TAG_MAX_LENGTH} characters")
    if len(normalized) > MAX_TAGS:
        raise ValueError(f"You can add up to {MAX_TAGS} tags")
    if len(set(normalized)) != len(normalized):
        raise ValueError("Tags must be unique")
    return normalized


def ensure_bulk_ids(todo_ids: Iterable[int]) -> list[int]:
    ids = list(dict.fromkeys(int(todo_id) for todo_id in todo_ids))
    if not ids:
        raise ValueError("Please select at least one item")
    if len(ids) > BULK_MAX_IDS:
        raise ValueError(f"Cannot perform bulk action on more than {BULK_MAX_IDS} items")
    if any(todo_id <= 0 for todo_id in ids):
        raise ValueError("Todo ids must be positive")
    return ids


__all__ = [
    "BULK_MAX_IDS",
    "DESCRIPTION_MAX_LENGTH",
    "MAX_TAGS",
    "SEARCH_MAX_LENGTH",
    "TAG_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "ensure_bulk_ids",
    "ensure_future_due_date",
    "ensure_valid_title",
    "normalize_description",
    "normalize_tags",
]
