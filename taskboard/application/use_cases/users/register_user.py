"""Use case for self-service sign-up."""

import logging

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_user_registered
from taskboard.domain.entities import ROLE_USER, User

from .create_user import create_user

logger = logging.getLogger(__name__)


def register_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
) -> User:
    """Create an unapproved account and tell administrators about it."""

    if password != confirm_password:
        raise ValueError("Passwords do not match")

    user = create_user(
        session,
        name=name,
        email=email,
        password=password,
        role=ROLE_USER,
        approved=False,
    )
    logger.info("User %s registered and awaits approval", user.id)
    notify_user_registered(session, user=user)
    return user
