"""Use cases for listing users."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from taskboard.domain.entities import PendingUser, User
from taskboard.infrastructure.repositories import UserRepository


def list_users(session: Session, *, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return a list of users respecting pagination parameters."""

    repository = UserRepository(session)
    return repository.list(skip=skip, limit=limit)


def list_pending_users(session: Session, *, limit: int | None = None) -> Sequence[PendingUser]:
    """Return registrations awaiting review, newest first."""

    repository = UserRepository(session)
    return repository.list_pending(limit=limit)
