"""Aggregate statistics shown on the admin dashboard."""

from __future__ import annotations

from dataclasses import dataclass


def compute_completion_rate(completed_todos: int, total_todos: int) -> int:
    """Return the completion percentage rounded half-up, ``0`` when there are no todos."""

    if total_todos <= 0:
        return 0
    return (200 * completed_todos + total_todos) // (2 * total_todos)


@dataclass(frozen=True)
class StatsProjection:
    """Counters kept in sync by applying deltas instead of re-fetching."""

    total_users: int = 0
    pending_users: int = 0
    total_todos: int = 0
    completed_todos: int = 0
    completion_rate: int = 0

    @classmethod
    def from_counts(
        cls,
        *,
        total_users: int,
        pending_users: int,
        total_todos: int,
        completed_todos: int,
    ) -> "StatsProjection":
        """Build a projection with counters clamped to consistent bounds."""

        total_users = max(0, total_users)
        pending_users = min(max(0, pending_users), total_users)
        total_todos = max(0, total_todos)
        completed_todos = min(max(0, completed_todos), total_todos)
        return cls(
            total_users=total_users,
            pending_users=pending_users,
            total_todos=total_todos,
            completed_todos=completed_todos,
            completion_rate=compute_completion_rate(completed_todos, total_todos),
        )


__all__ = ["StatsProjection", "compute_completion_rate"]
