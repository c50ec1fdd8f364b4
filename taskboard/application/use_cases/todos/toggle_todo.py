"""Use case for toggling the completion of a todo."""

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_todo_toggled
from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.repositories import TodoRepository

logger = logging.getLogger(__name__)


def toggle_todo(
    session: Session,
    *,
    todo_id: int,
    owner: User,
    completed: bool | None = None,
) -> Todo:
    """Set the completion flag, flipping it when ``completed`` is omitted."""

    repository = TodoRepository(session)
    current = repository.get_for_user(todo_id, owner.id)
    if current is None:
        raise ValueError("Todo not found")

    target = (not current.completed) if completed is None else completed
    if target == current.completed:
        return current

    saved = repository.update(replace(current, completed=target))
    logger.debug("Todo %s completed=%s", todo_id, target)
    notify_todo_toggled(session, todo=saved, owner=owner, was_completed=current.completed)
    return saved
