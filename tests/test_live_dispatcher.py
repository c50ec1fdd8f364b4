"""Tests for event classification, deduplication and routing."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from taskboard.application.live import (
    EventDispatcher,
    EventLedger,
    LiveState,
    MalformedEvent,
    ToastSurface,
    derive_event_key,
    parse_event,
)
from taskboard.domain.entities import StatsProjection

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _dispatcher(*, admin: bool = True, toasts: ToastSurface | None = None) -> EventDispatcher:
    state = LiveState(
        stats=StatsProjection.from_counts(
            total_users=5, pending_users=2, total_todos=10, completed_todos=4
        )
    )
    dispatcher = EventDispatcher(
        state,
        viewer_is_admin=admin,
        toasts=toasts,
        clock=lambda: NOW,
    )
    dispatcher.activate()
    return dispatcher


def test_duplicate_approval_is_applied_once():
    dispatcher = _dispatcher()

    assert dispatcher.dispatch("user-approved", {"userId": 7})
    assert not dispatcher.dispatch("user-approved", {"userId": 7})

    assert dispatcher.state.stats.pending_users == 1
    assert "user-approved:7" in dispatcher.ledger


def test_event_id_takes_precedence_over_entity_key():
    dispatcher = _dispatcher()

    dispatcher.dispatch("todo-created", {"todoId": 3, "eventId": "first"})
    dispatcher.dispatch("todo-created", {"todoId": 3, "eventId": "second"})
    dispatcher.dispatch("todo-created", {"todoId": 3, "eventId": "second"})

    assert dispatcher.state.stats.total_todos == 12


def test_redelivered_notification_creates_one_record():
    dispatcher = _dispatcher(admin=False)
    data = {"type": "success", "title": "Account Approved", "message": "Welcome"}

    assert dispatcher.dispatch("notification", data)
    assert not dispatcher.dispatch("notification", dict(data))

    assert len(dispatcher.state.inbox) == 1
    record = dispatcher.state.inbox.records[0]
    assert record.kind == "success"
    assert record.created_at == NOW


def test_notifications_in_different_buckets_are_distinct():
    payload = parse_event("notification", {"title": "Hello"})

    first = derive_event_key("notification", payload, received_at=NOW, bucket_seconds=5)
    same = derive_event_key(
        "notification", payload, received_at=NOW + timedelta(seconds=1), bucket_seconds=5
    )
    later = derive_event_key(
        "notification", payload, received_at=NOW + timedelta(seconds=30), bucket_seconds=5
    )

    assert first == same
    assert first != later


def test_toggle_back_and_forth_is_not_deduplicated():
    dispatcher = _dispatcher()

    dispatcher.dispatch("todo-completed", {"todoId": 1, "completed": True})
    dispatcher.dispatch("todo-completed", {"todoId": 1, "completed": False})

    assert dispatcher.state.stats.completed_todos == 4


def test_malformed_payload_is_dropped(caplog):
    dispatcher = _dispatcher()

    with caplog.at_level(logging.WARNING, logger="taskboard.application.live.dispatcher"):
        assert not dispatcher.dispatch("todo-deleted", {"todoId": 1})

    assert dispatcher.state.stats.total_todos == 10
    assert "Malformed 'todo-deleted' payload" in caplog.text


def test_unknown_event_is_dropped(caplog):
    dispatcher = _dispatcher()

    with caplog.at_level(logging.WARNING, logger="taskboard.application.live.dispatcher"):
        assert not dispatcher.dispatch("todo-archived", {"todoId": 1})

    assert "Dropping unknown realtime event todo-archived" in caplog.text
    assert len(dispatcher.ledger) == 0


def test_admin_events_are_ignored_for_regular_viewers():
    toasts = ToastSurface()
    dispatcher = _dispatcher(admin=False, toasts=toasts)

    assert not dispatcher.dispatch("todo-created", {"todoId": 1})
    assert not dispatcher.dispatch(
        "admin-notification", {"type": "info", "title": "New User Registration"}
    )
    assert not dispatcher.dispatch(
        "recent-todo", {"todoId": 1, "todoTitle": "Plan", "action": "created"}
    )

    assert dispatcher.state.stats.total_todos == 10
    assert len(dispatcher.state.inbox) == 0
    assert toasts.visible == ()


def test_events_are_ignored_while_unsubscribed():
    dispatcher = _dispatcher()
    dispatcher.deactivate()

    assert not dispatcher.dispatch("user-approved", {"userId": 7})
    assert dispatcher.state.stats.pending_users == 2


def test_admin_notification_goes_to_inbox_without_toast():
    toasts = ToastSurface()
    dispatcher = _dispatcher(toasts=toasts)

    dispatcher.dispatch(
        "admin-notification",
        {
            "type": "info",
            "title": "New User Registration",
            "message": "Ana has registered",
            "action": {"label": "Review User", "url": "/admin"},
        },
    )

    (record,) = dispatcher.state.inbox.records
    assert record.action.target == "/admin"
    assert toasts.visible == ()


def test_notification_toast_is_independent_of_inbox():
    toasts = ToastSurface()
    dispatcher = _dispatcher(admin=False, toasts=toasts)

    dispatcher.dispatch("notification", {"type": "warning", "title": "Heads up"})
    dispatcher.state.inbox.clear_all()

    assert len(toasts.visible) == 1
    assert toasts.visible[0].kind == "warning"


def test_registration_updates_projection_pending_list_and_toast():
    toasts = ToastSurface()
    dispatcher = _dispatcher(toasts=toasts)

    dispatcher.dispatch(
        "user-registered", {"userId": 11, "userName": "Ana", "userEmail": "ana@example.com"}
    )
    dispatcher.dispatch("user-rejected", {"userId": 11})

    assert dispatcher.state.stats.total_users == 5
    assert dispatcher.state.stats.pending_users == 2
    assert len(dispatcher.state.pending) == 0
    assert toasts.visible[0].title == "New User Registration"


def test_invalid_notification_kind_falls_back_to_info():
    payload = parse_event("notification", {"type": "critical", "title": "Odd"})

    assert payload.kind == "info"


def test_incomplete_action_is_discarded():
    payload = parse_event("notification", {"title": "Odd", "action": {"label": "Go"}})

    assert payload.action is None


def test_parse_event_rejects_non_objects():
    with pytest.raises(MalformedEvent):
        parse_event("notification", ["not", "an", "object"])


def test_on_change_runs_once_per_applied_event():
    changes = []
    dispatcher = EventDispatcher(
        LiveState(), viewer_is_admin=True, clock=lambda: NOW, on_change=lambda: changes.append(1)
    )
    dispatcher.activate()

    dispatcher.dispatch("todo-created", {"todoId": 1})
    dispatcher.dispatch("todo-created", {"todoId": 1})

    assert changes == [1]


def test_ledger_evicts_oldest_keys():
    ledger = EventLedger(max_size=2)

    assert ledger.record("a")
    assert ledger.record("b")
    assert ledger.record("c")

    assert "a" not in ledger
    assert ledger.record("a")
    assert not ledger.record("c")


def test_ledger_requires_positive_size():
    with pytest.raises(ValueError):
        EventLedger(max_size=0)
