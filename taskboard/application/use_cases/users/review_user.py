"""Use case for approving or rejecting a registration."""

import logging

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import (
    notify_user_approved,
    notify_user_rejected,
)
from taskboard.domain.entities import User
from taskboard.infrastructure.repositories import TodoRepository, UserRepository

logger = logging.getLogger(__name__)


def review_user(session: Session, *, user_id: int, approve: bool, reviewer: User) -> User:
    """Approve ``user_id`` or reject it by deleting the account and its todos.

    Returns the user as it was when the decision was applied.
    """

    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        raise ValueError("User not found")
    if user.id == reviewer.id:
        raise ValueError("You cannot review your own account")

    if approve:
        if user.approved:
            raise ValueError("User is already approved")
        approved_user = repository.set_approved(user_id, True)
        logger.info("User %s approved by %s", user_id, reviewer.id)
        notify_user_approved(session, user=approved_user)
        return approved_user

    if user.is_admin():
        raise ValueError("Administrators cannot be rejected")
    if user.approved:
        raise ValueError("Only pending users can be rejected")
    TodoRepository(session).delete_for_user(user_id)
    repository.delete(user_id)
    logger.info("User %s rejected by %s", user_id, reviewer.id)
    notify_user_rejected(session, user=user)
    return user
