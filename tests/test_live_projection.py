"""Tests for the stats projection reducers."""

from __future__ import annotations

from itertools import permutations, product

import pytest

from taskboard.application.live import apply_event, parse_event
from taskboard.domain.entities import StatsProjection, compute_completion_rate


def _snapshot() -> StatsProjection:
    return StatsProjection.from_counts(
        total_users=5, pending_users=2, total_todos=10, completed_todos=4
    )


def _apply(state: StatsProjection, event: str, data: dict) -> StatsProjection:
    return apply_event(state, event, parse_event(event, data))


def test_snapshot_reports_completion_rate():
    assert _snapshot().completion_rate == 40


def test_completing_then_deleting_recomputes_rate():
    state = _apply(_snapshot(), "todo-completed", {"todoId": 1, "completed": True})
    assert state.completed_todos == 5
    assert state.completion_rate == 50

    state = _apply(state, "todo-deleted", {"todoId": 1, "wasCompleted": True})
    assert state.total_todos == 9
    assert state.completed_todos == 4
    assert state.completion_rate == 44


def test_uncompleting_decrements_completed():
    state = _apply(_snapshot(), "todo-completed", {"todoId": 3, "completed": False})
    assert state.completed_todos == 3
    assert state.completion_rate == 30


def test_user_lifecycle_events():
    state = _apply(_snapshot(), "user-registered", {"userId": 9, "userEmail": "new@example.com"})
    assert (state.total_users, state.pending_users) == (6, 3)

    state = _apply(state, "user-approved", {"userId": 9})
    assert (state.total_users, state.pending_users) == (6, 2)

    state = _apply(state, "user-rejected", {"userId": 8})
    assert (state.total_users, state.pending_users) == (5, 1)


def test_counters_never_go_negative():
    state = StatsProjection()
    state = _apply(state, "user-approved", {"userId": 1})
    state = _apply(state, "todo-deleted", {"todoId": 1, "wasCompleted": True})
    state = _apply(state, "todo-completed", {"todoId": 1, "completed": False})

    assert state == StatsProjection()


def test_completed_never_exceeds_total():
    state = StatsProjection.from_counts(
        total_users=1, pending_users=0, total_todos=1, completed_todos=1
    )
    state = _apply(state, "todo-completed", {"todoId": 1, "completed": True})

    assert state.completed_todos == 1
    assert state.completion_rate == 100


def test_events_without_reducer_leave_state_untouched():
    state = _snapshot()
    payload = parse_event("notification", {"title": "Hello"})

    assert apply_event(state, "notification", payload) is state


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (4, 9, 44), (3, 3, 100)],
)
def test_completion_rate_rounds_half_up(completed, total, expected):
    assert compute_completion_rate(completed, total) == expected


USER_EVENTS = {
    "user-registered": {"userId": 20, "userEmail": "queued@example.com"},
    "user-approved": {"userId": 20},
}

MIXED_EVENTS = [
    ("user-registered", {"userId": 21, "userEmail": "late@example.com"}),
    ("user-approved", {"userId": 11}),
    ("user-approved", {"userId": 12}),
    ("todo-completed", {"todoId": 2, "completed": True}),
    ("todo-deleted", {"todoId": 3, "wasCompleted": False}),
]


def _assert_consistent(state: StatsProjection) -> None:
    assert 0 <= state.pending_users <= state.total_users
    assert 0 <= state.completed_todos <= state.total_todos
    assert state.completion_rate == compute_completion_rate(
        state.completed_todos, state.total_todos
    )


@pytest.mark.parametrize("sequence", list(product(USER_EVENTS, repeat=6)))
def test_pending_users_stay_within_total_users(sequence):
    state = StatsProjection()

    for event in sequence:
        state = _apply(state, event, USER_EVENTS[event])
        _assert_consistent(state)


@pytest.mark.parametrize("order", list(permutations(range(len(MIXED_EVENTS)))))
def test_event_order_does_not_change_the_outcome(order):
    state = StatsProjection.from_counts(
        total_users=4, pending_users=2, total_todos=4, completed_todos=1
    )

    for index in order:
        event, data = MIXED_EVENTS[index]
        state = _apply(state, event, data)
        _assert_consistent(state)

    assert state == StatsProjection.from_counts(
        total_users=5, pending_users=1, total_todos=3, completed_todos=2
    )
    assert state.completion_rate == 67


def test_reducer_refuses_payload_for_another_event():
    payload = parse_event("todo-created", {"todoId": 1})

    with pytest.raises(TypeError):
        apply_event(_snapshot(), "todo-completed", payload)
