"""Use case for creating todos."""

from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_todo_created
from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.repositories import TodoRepository

from .validators import (
    ensure_future_due_date,
    ensure_valid_title,
    normalize_description,
    normalize_tags,
)


def create_todo(
    session: Session,
    *,
    owner: User,
    title: str,
    description: str | None = None,
    due_date: datetime | None = None,
    tags: Iterable[str] | str | None = None,
) -> Todo:
    """Persist a new todo for ``owner`` and publish it to admin dashboards."""

    todo = Todo(
        id=None,
        user_id=owner.id,
        title=ensure_valid_title(title),
        description=normalize_description(description),
        completed=False,
        due_date=ensure_future_due_date(due_date),
        tags=normalize_tags(tags),
    )
    created = TodoRepository(session).create(todo)
    notify_todo_created(session, todo=created, owner=owner)
    return created
