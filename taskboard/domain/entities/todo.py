"""Domain entity representing a todo item."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Todo:
    """A task owned by a single user."""

    id: int | None
    user_id: int
    title: str
    description: str | None = None
    completed: bool = False
    due_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["Todo"]
