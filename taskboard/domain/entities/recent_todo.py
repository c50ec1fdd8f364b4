"""Domain entity describing an item of the admin recent-todo feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

RECENT_TODO_CREATED = "created"
RECENT_TODO_UPDATED = "updated"
RECENT_TODO_COMPLETED = "completed"
RECENT_TODO_DELETED = "deleted"
RECENT_TODO_ACTIONS = (
    RECENT_TODO_CREATED,
    RECENT_TODO_UPDATED,
    RECENT_TODO_COMPLETED,
    RECENT_TODO_DELETED,
)


@dataclass(frozen=True)
class RecentTodo:
    """Read-only summary of a todo visible to administrators."""

    todo_id: int
    title: str
    user_id: int | None
    user_name: str | None
    completed: bool
    created_at: datetime | None


__all__ = [
    "RECENT_TODO_ACTIONS",
    "RECENT_TODO_COMPLETED",
    "RECENT_TODO_CREATED",
    "RECENT_TODO_DELETED",
    "RECENT_TODO_UPDATED",
    "RecentTodo",
]
