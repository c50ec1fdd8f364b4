"""Utility helpers to publish realtime events after domain mutations."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from taskboard.config import get_settings
from taskboard.domain.entities import (
    NOTIFICATION_INFO,
    NOTIFICATION_SUCCESS,
    RECENT_TODO_COMPLETED,
    RECENT_TODO_CREATED,
    RECENT_TODO_DELETED,
    RECENT_TODO_UPDATED,
    Todo,
    User,
    user_channel_name,
)
from taskboard.infrastructure.realtime import dispatch_realtime_event
from taskboard.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

ADMIN_DASHBOARD_URL = "/admin"
USER_DASHBOARD_URL = "/dashboard"


def _publish(channel_names: Iterable[str], *, event: str, payload: dict[str, Any]) -> None:
    channels = list(channel_names)
    if not channels:
        return
    try:
        dispatch_realtime_event(channels, event=event, payload=payload)
    except Exception:
        logger.exception("Failed to publish %s to %s", event, ", ".join(channels))


def _admin_user_channels(session: Session) -> list[str]:
    """Return the private channel of every administrator."""

    repository = UserRepository(session)
    return [user_channel_name(admin_id) for admin_id in repository.list_admin_ids()]


def _admin_notification(
    *, kind: str, title: str, message: str, action_label: str, url: str = ADMIN_DASHBOARD_URL
) -> None:
    _publish(
        [get_settings().admin_channel],
        event="admin-notification",
        payload={
            "type": kind,
            "title": title,
            "message": message,
            "action": {"label": action_label, "url": url},
        },
    )


def _recent_todo(session: Session, *, todo: Todo, owner: User, action: str) -> None:
    _publish(
        _admin_user_channels(session),
        event="recent-todo",
        payload={
            "todoId": todo.id,
            "todoTitle": todo.title,
            "userId": owner.id,
            "userName": owner.display_name,
            "action": action,
        },
    )


def notify_user_registered(session: Session, *, user: User) -> None:
    """Tell administrators that ``user`` signed up and awaits review."""

    _admin_notification(
        kind=NOTIFICATION_INFO,
        title="New User Registration",
        message=f"{user.display_name} ({user.email}) has registered and is pending approval.",
        action_label="Review User",
    )
    _publish(
        _admin_user_channels(session),
        event="user-registered",
        payload={
            "userId": user.id,
            "userName": user.name,
            "userEmail": user.email,
        },
    )


def notify_user_approved(session: Session, *, user: User) -> None:
    """Update admin dashboards and welcome the approved user."""

    _publish(_admin_user_channels(session), event="user-approved", payload={"userId": user.id})
    _publish(
        [user_channel_name(user.id)],
        event="notification",
        payload={
            "type": NOTIFICATION_SUCCESS,
            "title": "Account Approved",
            "message": "Your account has been approved. You can now manage your tasks.",
            "action": {"label": "Open Dashboard", "url": USER_DASHBOARD_URL},
        },
    )


def notify_user_rejected(session: Session, *, user: User) -> None:
    _publish(_admin_user_channels(session), event="user-rejected", payload={"userId": user.id})


def notify_todo_created(session: Session, *, todo: Todo, owner: User) -> None:
    _publish(
        _admin_user_channels(session),
        event="todo-created",
        payload={"todoId": todo.id, "userId": owner.id},
    )
    _recent_todo(session, todo=todo, owner=owner, action=RECENT_TODO_CREATED)


def notify_todo_updated(session: Session, *, todo: Todo, owner: User) -> None:
    _recent_todo(session, todo=todo, owner=owner, action=RECENT_TODO_UPDATED)


def notify_todo_toggled(
    session: Session, *, todo: Todo, owner: User, was_completed: bool
) -> None:
    """Publish a completion change; a newly completed todo also reaches the admin inbox."""

    if todo.completed == was_completed:
        return
    _publish(
        _admin_user_channels(session),
        event="todo-completed",
        payload={"todoId": todo.id, "userId": owner.id, "completed": todo.completed},
    )
    if not todo.completed:
        return
    _recent_todo(session, todo=todo, owner=owner, action=RECENT_TODO_COMPLETED)
    _admin_notification(
        kind=NOTIFICATION_SUCCESS,
        title="Task Completed",
        message=f'"{todo.title}" has been marked as completed by {owner.display_name}.',
        action_label="View Task",
    )


def notify_todo_deleted(session: Session, *, todo: Todo, owner: User) -> None:
    _publish(
        _admin_user_channels(session),
        event="todo-deleted",
        payload={"todoId": todo.id, "userId": owner.id, "wasCompleted": todo.completed},
    )
    _recent_todo(session, todo=todo, owner=owner, action=RECENT_TODO_DELETED)


__all__ = [
    "notify_todo_created",
    "notify_todo_deleted",
    "notify_todo_toggled",
    "notify_todo_updated",
    "notify_user_approved",
    "notify_user_registered",
    "notify_user_rejected",
]
