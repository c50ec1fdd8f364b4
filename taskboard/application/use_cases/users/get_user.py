"""Use case for retrieving a single user."""

from sqlalchemy.orm import Session

from taskboard.domain.entities import User
from taskboard.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: int) -> User:
    """Return the requested user or raise an error if it does not exist."""

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise ValueError("User not found")
    return user
