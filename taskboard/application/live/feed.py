"""Admin-side lists kept in sync by realtime events."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from taskboard.domain.entities import (
    RECENT_TODO_COMPLETED,
    RECENT_TODO_CREATED,
    RECENT_TODO_DELETED,
    RECENT_TODO_UPDATED,
    PendingUser,
    RecentTodo,
)
from taskboard.utils import isoformat_or_none

from .payloads import RecentTodoPayload, UserRegisteredPayload

RECENT_TODO_LIMIT = 10


class PendingUsersList:
    """Registrations awaiting review, newest first."""

    def __init__(self, entries: Iterable[PendingUser] = ()) -> None:
        self._entries: list[PendingUser] = []
        for entry in entries:
            if self._index(entry.user_id) is None:
                self._entries.append(entry)

    def add(self, payload: UserRegisteredPayload) -> bool:
        if self._index(payload.user_id) is not None:
            return False
        self._entries.insert(
            0,
            PendingUser(
                user_id=payload.user_id,
                name=payload.user_name,
                email=payload.user_email,
                registered_at=payload.timestamp,
            ),
        )
        return True

    def remove(self, user_id: int) -> bool:
        index = self._index(user_id)
        if index is None:
            return False
        del self._entries[index]
        return True

    @property
    def entries(self) -> tuple[PendingUser, ...]:
        return tuple(self._entries)

    def as_payload(self) -> list[dict[str, Any]]:
        return [
            {
                "userId": entry.user_id,
                "name": entry.name,
                "email": entry.email,
                "registeredAt": isoformat_or_none(entry.registered_at),
            }
            for entry in self._entries
        ]

    def _index(self, user_id: int) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.user_id == user_id:
                return index
        return None

    def __len__(self) -> int:
        return len(self._entries)


class RecentTodoFeed:
    """Bounded, read-only feed of recent todo activity.

    The newest entry sits at the head. Once ``limit`` entries are held the
    oldest one is dropped to make room.
    """

    def __init__(self, entries: Iterable[RecentTodo] = (), *, limit: int = RECENT_TODO_LIMIT) -> None:
        self._limit = limit
        self._entries: list[RecentTodo] = []
        for entry in entries:
            if self._index(entry.todo_id) is None:
                self._entries.append(entry)
        del self._entries[limit:]

    def apply(self, payload: RecentTodoPayload) -> bool:
        """Apply a ``recent-todo`` action and return ``True`` when the feed changed."""

        index = self._index(payload.todo_id)
        if payload.action == RECENT_TODO_CREATED:
            if index is not None:
                return False
            self._entries.insert(
                0,
                RecentTodo(
                    todo_id=payload.todo_id,
                    title=payload.todo_title,
                    user_id=payload.user_id,
                    user_name=payload.user_name,
                    completed=False,
                    created_at=payload.timestamp,
                ),
            )
            del self._entries[self._limit :]
            return True

        if index is None:
            return False
        current = self._entries[index]
        if payload.action == RECENT_TODO_UPDATED:
            if current.title == payload.todo_title:
                return False
            self._entries[index] = replace(current, title=payload.todo_title)
            return True
        if payload.action == RECENT_TODO_COMPLETED:
            if current.completed:
                return False
            self._entries[index] = replace(current, completed=True)
            return True
        if payload.action == RECENT_TODO_DELETED:
            del self._entries[index]
            return True
        return False

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def entries(self) -> tuple[RecentTodo, ...]:
        return tuple(self._entries)

    def as_payload(self) -> list[dict[str, Any]]:
        return [
            {
                "todoId": entry.todo_id,
                "title": entry.title,
                "userId": entry.user_id,
                "userName": entry.user_name,
                "completed": entry.completed,
                "createdAt": isoformat_or_none(entry.created_at),
            }
            for entry in self._entries
        ]

    def _index(self, todo_id: int) -> int | None:
        for index, entry in enumerate(self._entries):
            if entry.todo_id == todo_id:
                return index
        return None

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["RECENT_TODO_LIMIT", "PendingUsersList", "RecentTodoFeed"]
