"""Pure transitions applying realtime deltas to the stats projection."""

from __future__ import annotations

from typing import Callable, Dict

from taskboard.domain.entities import StatsProjection

from .payloads import (
    EVENT_TODO_COMPLETED,
    EVENT_TODO_CREATED,
    EVENT_TODO_DELETED,
    EVENT_USER_APPROVED,
    EVENT_USER_REGISTERED,
    EVENT_USER_REJECTED,
    EventPayload,
    TodoCompletedPayload,
    TodoDeletedPayload,
)

ProjectionReducer = Callable[[StatsProjection, EventPayload], StatsProjection]


def _rebuild(state: StatsProjection, **changes: int) -> StatsProjection:
    counts = {
        "total_users": state.total_users,
        "pending_users": state.pending_users,
        "total_todos": state.total_todos,
        "completed_todos": state.completed_todos,
    }
    counts.update(changes)
    return StatsProjection.from_counts(**counts)


def apply_user_registered(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    return _rebuild(
        state,
        total_users=state.total_users + 1,
        pending_users=state.pending_users + 1,
    )


def apply_user_approved(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    return _rebuild(state, pending_users=state.pending_users - 1)


def apply_user_rejected(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    # Rejected registrations are deleted, so they leave the user total as well.
    return _rebuild(
        state,
        total_users=state.total_users - 1,
        pending_users=state.pending_users - 1,
    )


def apply_todo_created(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    return _rebuild(state, total_todos=state.total_todos + 1)


def apply_todo_completed(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    if not isinstance(payload, TodoCompletedPayload):
        raise TypeError("todo-completed reducer received an unexpected payload")
    delta = 1 if payload.completed else -1
    return _rebuild(state, completed_todos=state.completed_todos + delta)


def apply_todo_deleted(state: StatsProjection, payload: EventPayload) -> StatsProjection:
    if not isinstance(payload, TodoDeletedPayload):
        raise TypeError("todo-deleted reducer received an unexpected payload")
    completed = state.completed_todos - 1 if payload.was_completed else state.completed_todos
    return _rebuild(state, total_todos=state.total_todos - 1, completed_todos=completed)


PROJECTION_REDUCERS: Dict[str, ProjectionReducer] = {
    EVENT_USER_REGISTERED: apply_user_registered,
    EVENT_USER_APPROVED: apply_user_approved,
    EVENT_USER_REJECTED: apply_user_rejected,
    EVENT_TODO_CREATED: apply_todo_created,
    EVENT_TODO_COMPLETED: apply_todo_completed,
    EVENT_TODO_DELETED: apply_todo_deleted,
}


def apply_event(state: StatsProjection, event_name: str, payload: EventPayload) -> StatsProjection:
    """Return the projection that results from applying ``payload``.

    Events without a registered reducer leave ``state`` unchanged.
    """

    reducer = PROJECTION_REDUCERS.get(event_name)
    if reducer is None:
        return state
    return reducer(state, payload)


__all__ = [
    "PROJECTION_REDUCERS",
    "ProjectionReducer",
    "apply_event",
    "apply_todo_completed",
    "apply_todo_created",
    "apply_todo_deleted",
    "apply_user_approved",
    "apply_user_registered",
    "apply_user_rejected",
]
