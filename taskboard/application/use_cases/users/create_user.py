"""Use case for creating users."""

from sqlalchemy.orm import Session

from taskboard.domain.entities import ROLE_USER, ROLES, User
from taskboard.infrastructure.repositories import UserRepository
from taskboard.infrastructure.security import get_password_hash
from taskboard.utils import utc_now

from .validators import ensure_valid_name, ensure_valid_password, normalize_email


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
    approved: bool = False,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    normalized_email = normalize_email(email)

    if repository.get_by_email(normalized_email):
        raise ValueError("Email is already registered")

    role_alias = role.lower()
    if role_alias not in ROLES:
        raise ValueError("Role not allowed")

    user = User(
        id=None,
        name=ensure_valid_name(name),
        email=normalized_email,
        password=get_password_hash(ensure_valid_password(password)),
        role=role_alias,
        approved=approved,
        created_at=utc_now(),
    )

    return repository.create(user)
