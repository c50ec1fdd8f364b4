"""Use case for authenticating a user."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from taskboard.infrastructure.repositories import UserRepository
from taskboard.infrastructure.security import verify_password


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    PENDING_APPROVAL = auto()


def authenticate_user(session: Session, email: str, password: str):
    """Return the authentication result along with the user when possible."""

    repository = UserRepository(session)
    user = repository.get_by_email(email)

    if not user:
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not user.approved:
        return user, AuthenticationStatus.PENDING_APPROVAL

    return user, AuthenticationStatus.SUCCESS
