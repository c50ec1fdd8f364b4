"""Use cases for reading todos."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.repositories import (
    FILTER_ALL,
    FILTER_COMPLETED,
    FILTER_PENDING,
    TodoRepository,
)

from .validators import SEARCH_MAX_LENGTH

STATUS_FILTERS = (FILTER_ALL, FILTER_COMPLETED, FILTER_PENDING)


def list_todos(
    session: Session,
    *,
    owner: User,
    status_filter: str = FILTER_ALL,
    search: str | None = None,
) -> Sequence[Todo]:
    """Return the todos of ``owner`` matching the filter and search term."""

    if status_filter not in STATUS_FILTERS:
        raise ValueError("Filter must be one of: all, completed, pending")
    term = (search or "").strip()
    if len(term) > SEARCH_MAX_LENGTH:
        raise ValueError("Search term too long")

    repository = TodoRepository(session)
    return repository.list_for_user(owner.id, status_filter=status_filter, search=term or None)


def get_todo(session: Session, *, todo_id: int, owner: User) -> Todo:
    """Return ``todo_id`` when it belongs to ``owner``."""

    todo = TodoRepository(session).get_for_user(todo_id, owner.id)
    if todo is None:
        raise ValueError("Todo not found")
    return todo
