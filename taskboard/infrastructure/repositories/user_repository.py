"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from taskboard.domain.entities import ROLE_ADMIN, PendingUser, User
from taskboard.infrastructure.models import UserModel
from taskboard.utils import as_utc, to_storage, utc_now


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, skip: int = 0, limit: int = 100) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_pending(self, limit: int | None = None) -> Sequence[PendingUser]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.approved.is_(False))
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [
            PendingUser(
                user_id=model.id,
                name=model.name,
                email=model.email,
                registered_at=as_utc(model.created_at),
            )
            for model in query.all()
        ]

    def list_admin_ids(self) -> list[int]:
        query = self.session.query(UserModel.id).filter(
            func.lower(UserModel.role) == ROLE_ADMIN
        )
        return [user_id for (user_id,) in query.all()]

    def count(self, *, approved: bool | None = None) -> int:
        query = self.session.query(func.count(UserModel.id))
        if approved is not None:
            query = query.filter(UserModel.approved.is_(approved))
        return int(query.scalar() or 0)

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        model.created_at = to_storage(user.created_at or utc_now())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def set_approved(self, user_id: int, approved: bool = True) -> User:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        model.approved = approved
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, user_id: int) -> None:
        model = self.session.get(UserModel, user_id)
        if model is None:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)
        self.session.delete(model)
        self.session.commit()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            approved=bool(model.approved),
            created_at=as_utc(model.created_at),
        )

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email
        model.password = user.password
        model.role = user.role
        model.approved = user.approved


__all__ = ["UserRepository"]
