"""Public helpers for emitting realtime domain events."""

from .events import (
    notify_todo_created,
    notify_todo_deleted,
    notify_todo_toggled,
    notify_todo_updated,
    notify_user_approved,
    notify_user_registered,
    notify_user_rejected,
)

__all__ = [
    "notify_todo_created",
    "notify_todo_deleted",
    "notify_todo_toggled",
    "notify_todo_updated",
    "notify_user_approved",
    "notify_user_registered",
    "notify_user_rejected",
]
