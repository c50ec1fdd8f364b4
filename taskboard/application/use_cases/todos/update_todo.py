"""Use case for editing todos."""

from dataclasses import replace
from typing import Any, Mapping

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_todo_updated
from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.repositories import TodoRepository
from taskboard.utils import as_utc

from .validators import (
    ensure_future_due_date,
    ensure_valid_title,
    normalize_description,
    normalize_tags,
)

EDITABLE_FIELDS = ("title", "description", "due_date", "tags")


def update_todo(
    session: Session,
    *,
    todo_id: int,
    owner: User,
    changes: Mapping[str, Any],
) -> Todo:
    """Apply ``changes`` to a todo owned by ``owner``.

    Only the keys present in ``changes`` are validated and written. An
    unchanged due date is kept even when it already lies in the past.
    """

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported fields: {', '.join(sorted(unknown))}")

    repository = TodoRepository(session)
    current = repository.get_for_user(todo_id, owner.id)
    if current is None:
        raise ValueError("Todo not found")

    updated = current
    if "title" in changes:
        updated = replace(updated, title=ensure_valid_title(changes["title"]))
    if "description" in changes:
        updated = replace(updated, description=normalize_description(changes["description"]))
    if "due_date" in changes:
        due_date = as_utc(changes["due_date"])
        if due_date != current.due_date:
            due_date = ensure_future_due_date(due_date)
        updated = replace(updated, due_date=due_date)
    if "tags" in changes:
        updated = replace(updated, tags=normalize_tags(changes["tags"]))

    saved = repository.update(updated)
    notify_todo_updated(session, todo=saved, owner=owner)
    return saved
