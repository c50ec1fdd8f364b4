"""Schemas describing the admin dashboard statistics."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .user import PendingUserRead


class RecentTodoRead(BaseModel):
    todo_id: int
    title: str
    user_id: int | None
    user_name: str | None
    completed: bool
    created_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class StatsRead(BaseModel):
    total_users: int
    pending_users: int
    total_todos: int
    completed_todos: int
    completion_rate: int

    model_config = ConfigDict(from_attributes=True)


class AdminSnapshotRead(StatsRead):
    pending: list[PendingUserRead]
    recent_todos: list[RecentTodoRead]
