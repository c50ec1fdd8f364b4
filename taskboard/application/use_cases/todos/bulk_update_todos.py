"""Use case for acting on several todos at once."""

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import (
    notify_todo_deleted,
    notify_todo_toggled,
)
from taskboard.domain.entities import User
from taskboard.infrastructure.repositories import TodoRepository

from .validators import ensure_bulk_ids

BULK_COMPLETE = "complete"
BULK_DELETE = "delete"
BULK_ACTIONS = (BULK_COMPLETE, BULK_DELETE)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkResult:
    action: str
    ids: tuple[int, ...]

    @property
    def count(self) -> int:
        return len(self.ids)

    @property
    def message(self) -> str:
        noun = "todo" if self.count == 1 else "todos"
        return f"Successfully {self.action}d {self.count} {noun}"


def bulk_update_todos(
    session: Session,
    *,
    owner: User,
    todo_ids: Iterable[int],
    action: str,
) -> BulkResult:
    """Complete or delete the given todos that belong to ``owner``.

    Ids owned by somebody else are ignored. ``LookupError`` is raised when
    none of the ids is usable.
    """

    if action not in BULK_ACTIONS:
        raise ValueError("Invalid action")
    ids = ensure_bulk_ids(todo_ids)

    repository = TodoRepository(session)
    todos = repository.list_owned(ids, owner.id)
    if not todos:
        raise LookupError("No valid todos found")

    valid_ids = [todo.id for todo in todos]
    if action == BULK_COMPLETE:
        repository.set_completed(valid_ids, True)
        for todo in todos:
            notify_todo_toggled(
                session,
                todo=replace(todo, completed=True),
                owner=owner,
                was_completed=todo.completed,
            )
    else:
        repository.delete_many(valid_ids)
        for todo in todos:
            notify_todo_deleted(session, todo=todo, owner=owner)

    logger.info("User %s applied %s to %s todos", owner.id, action, len(valid_ids))
    return BulkResult(action=action, ids=tuple(valid_ids))
