"""Use case for computing the statistics shown on the admin dashboard."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from taskboard.domain.entities import PendingUser, RecentTodo, StatsProjection
from taskboard.infrastructure.repositories import TodoRepository, UserRepository

RECENT_TODOS_LIMIT = 10


@dataclass
class AdminSnapshot:
    """Counters plus the lists a freshly mounted admin dashboard renders."""

    stats: StatsProjection
    pending: list[PendingUser]
    recent_todos: list[RecentTodo]


def list_recent_todos(session: Session, *, limit: int = RECENT_TODOS_LIMIT) -> list[RecentTodo]:
    """Return the newest todos across every user."""

    pairs = TodoRepository(session).list_with_owners(limit=limit)
    return [
        RecentTodo(
            todo_id=todo.id,
            title=todo.title,
            user_id=owner.id,
            user_name=owner.display_name,
            completed=todo.completed,
            created_at=todo.created_at,
        )
        for todo, owner in pairs
    ]


def get_stats(session: Session) -> StatsProjection:
    users = UserRepository(session)
    todos = TodoRepository(session)
    return StatsProjection.from_counts(
        total_users=users.count(),
        pending_users=users.count(approved=False),
        total_todos=todos.count(),
        completed_todos=todos.count(completed=True),
    )


def get_admin_snapshot(session: Session) -> AdminSnapshot:
    """Return the point-in-time state live admin sessions are seeded from."""

    return AdminSnapshot(
        stats=get_stats(session),
        pending=list(UserRepository(session).list_pending()),
        recent_todos=list_recent_todos(session),
    )


__all__ = [
    "AdminSnapshot",
    "RECENT_TODOS_LIMIT",
    "get_admin_snapshot",
    "get_stats",
    "list_recent_todos",
]
