"""Use case for deleting a todo."""

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_todo_deleted
from taskboard.domain.entities import User
from taskboard.infrastructure.repositories import TodoRepository


def delete_todo(session: Session, *, todo_id: int, owner: User) -> None:
    """Delete the specified todo when it belongs to ``owner``."""

    repository = TodoRepository(session)
    todo = repository.get_for_user(todo_id, owner.id)
    if todo is None:
        raise ValueError("Todo not found")
    repository.delete_many([todo.id])
    notify_todo_deleted(session, todo=todo, owner=owner)
