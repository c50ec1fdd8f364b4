"""Persistence helpers for todo entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.models import TodoModel, UserModel
from taskboard.utils import as_utc, to_storage, utc_now

FILTER_ALL = "all"
FILTER_COMPLETED = "completed"
FILTER_PENDING = "pending"


class TodoRepository:
    """Provide CRUD operations for :class:`Todo` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self,
        user_id: int,
        *,
        status_filter: str = FILTER_ALL,
        search: str | None = None,
    ) -> Sequence[Todo]:
        query = self.session.query(TodoModel).filter(TodoModel.user_id == user_id)
        if status_filter == FILTER_COMPLETED:
            query = query.filter(TodoModel.completed.is_(True))
        elif status_filter == FILTER_PENDING:
            query = query.filter(TodoModel.completed.is_(False))
        if search:
            term = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(TodoModel.title).like(term),
                    func.lower(func.coalesce(TodoModel.description, "")).like(term),
                )
            )
        query = query.order_by(TodoModel.created_at.desc(), TodoModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def list_with_owners(self, *, limit: int | None = None) -> Sequence[tuple[Todo, User]]:
        query = (
            self.session.query(TodoModel, UserModel)
            .join(UserModel, TodoModel.user_id == UserModel.id)
            .order_by(TodoModel.created_at.desc(), TodoModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [
            (self._to_entity(todo), self._owner_to_entity(owner))
            for todo, owner in query.all()
        ]

    def get_for_user(self, todo_id: int, user_id: int) -> Todo | None:
        model = (
            self.session.query(TodoModel)
            .filter(TodoModel.id == todo_id, TodoModel.user_id == user_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def list_owned(self, todo_ids: Iterable[int], user_id: int) -> Sequence[Todo]:
        ids = list({int(todo_id) for todo_id in todo_ids})
        if not ids:
            return []
        query = (
            self.session.query(TodoModel)
            .filter(TodoModel.id.in_(ids), TodoModel.user_id == user_id)
            .order_by(TodoModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def count(self, *, completed: bool | None = None) -> int:
        query = self.session.query(func.count(TodoModel.id))
        if completed is not None:
            query = query.filter(TodoModel.completed.is_(completed))
        return int(query.scalar() or 0)

    def create(self, todo: Todo) -> Todo:
        model = TodoModel()
        self._apply_entity_to_model(model, todo)
        now = to_storage(utc_now())
        model.created_at = to_storage(todo.created_at) or now
        model.updated_at = now
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, todo: Todo) -> Todo:
        if todo.id is None:
            raise ValueError("Todo id is required for updates")
        model = self.session.get(TodoModel, todo.id)
        if model is None:
            msg = f"Todo with id {todo.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, todo)
        model.updated_at = to_storage(utc_now())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def set_completed(self, todo_ids: Iterable[int], completed: bool) -> None:
        ids = [todo_id for todo_id in todo_ids if todo_id is not None]
        if not ids:
            return
        self.session.query(TodoModel).filter(TodoModel.id.in_(ids)).update(
            {
                TodoModel.completed: completed,
                TodoModel.updated_at: to_storage(utc_now()),
            },
            synchronize_session=False,
        )
        self.session.commit()

    def delete_many(self, todo_ids: Iterable[int]) -> None:
        ids = [todo_id for todo_id in todo_ids if todo_id is not None]
        if not ids:
            return
        self.session.query(TodoModel).filter(TodoModel.id.in_(ids)).delete(
            synchronize_session=False
        )
        self.session.commit()

    def delete_for_user(self, user_id: int) -> None:
        self.session.query(TodoModel).filter(TodoModel.user_id == user_id).delete(
            synchronize_session=False
        )
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(model: TodoModel, todo: Todo) -> None:
        model.user_id = todo.user_id
        model.title = todo.title
        model.description = todo.description
        model.completed = todo.completed
        model.due_date = to_storage(todo.due_date)
        model.tags = list(todo.tags or [])

    @staticmethod
    def _to_entity(model: TodoModel) -> Todo:
        return Todo(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            description=model.description,
            completed=bool(model.completed),
            due_date=as_utc(model.due_date),
            tags=list(model.tags or []),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    @staticmethod
    def _owner_to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            approved=bool(model.approved),
            created_at=as_utc(model.created_at),
        )


__all__ = [
    "FILTER_ALL",
    "FILTER_COMPLETED",
    "FILTER_PENDING",
    "TodoRepository",
]
