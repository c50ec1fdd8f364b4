"""Tests for the live session lifecycle and channel adapter."""

from __future__ import annotations

import anyio
import pytest

from taskboard.application.live import (
    CHANGE_STATE,
    ChannelAdapter,
    ConnectionState,
    LiveSession,
    LiveSnapshot,
    SessionStatus,
    SubscriptionStatus,
    Viewer,
)
from taskboard.domain.entities import PendingUser, StatsProjection

ADMIN_CHANNEL = "private-admin"


def _snapshot() -> LiveSnapshot:
    return LiveSnapshot(
        stats=StatsProjection.from_counts(
            total_users=5, pending_users=2, total_todos=10, completed_todos=4
        ),
        pending=(PendingUser(user_id=7, name="Ana", email="ana@example.com", registered_at=None),),
    )


def _session(transport, *, admin: bool = True, loader=None) -> LiveSession:
    async def _load() -> LiveSnapshot:
        return _snapshot()

    return LiveSession(
        Viewer(user_id=1, is_admin=admin),
        transport=transport,
        load_snapshot=loader or _load,
        admin_channel=ADMIN_CHANNEL,
    )


def test_mount_seeds_snapshot_and_subscribes(transport):
    session = _session(transport)

    anyio.run(session.mount)

    assert session.status is SessionStatus.READY
    assert session.connection_state is ConnectionState.CONNECTED
    assert transport.joined == ["private-user-1", ADMIN_CHANNEL]
    assert session.stats.completion_rate == 40
    assert session.channels == {
        "private-user-1": SubscriptionStatus.SUBSCRIBED,
        ADMIN_CHANNEL: SubscriptionStatus.SUBSCRIBED,
    }
    assert not session.degraded


def test_regular_viewer_only_joins_own_channel(transport):
    session = _session(transport, admin=False)

    anyio.run(session.mount)

    assert transport.joined == ["private-user-1"]
    assert "stats" not in session.as_payload()


def test_events_flow_from_channels_into_state(transport):
    session = _session(transport)
    changes = []
    session.add_observer(changes.append)
    anyio.run(session.mount)

    transport.emit("private-user-1", "user-approved", {"userId": 7})
    transport.emit("private-user-1", "user-approved", {"userId": 7})
    transport.emit(
        ADMIN_CHANNEL, "admin-notification", {"type": "info", "title": "New User Registration"}
    )

    assert session.stats.pending_users == 1
    assert session.as_payload()["pendingUsers"] == []
    assert session.inbox.unread_count() == 1
    assert changes.count(CHANGE_STATE) == 2


def test_unbound_events_on_admin_channel_are_ignored(transport):
    session = _session(transport)
    anyio.run(session.mount)

    transport.emit(ADMIN_CHANNEL, "user-approved", {"userId": 7})

    assert session.stats.pending_users == 2


def test_inbox_actions_notify_observers(transport):
    session = _session(transport, admin=False)
    changes = []
    anyio.run(session.mount)
    session.add_observer(changes.append)

    transport.emit("private-user-1", "notification", {"title": "First"})
    transport.emit("private-user-1", "notification", {"title": "Second"})
    first_id = session.inbox.records[-1].id

    assert session.mark_read(first_id)
    assert not session.mark_read(first_id)
    assert session.mark_all_read()
    assert not session.mark_all_read()
    assert session.clear_notification(first_id)
    assert session.clear_all()
    assert len(session.inbox) == 0
    assert changes == [CHANGE_STATE] * 6


def test_snapshot_failure_moves_to_error_and_retry_recovers(transport):
    attempts = []

    async def _flaky() -> LiveSnapshot:
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("database unavailable")
        return _snapshot()

    session = _session(transport, loader=_flaky)

    anyio.run(session.mount)
    assert session.status is SessionStatus.ERROR
    assert session.error == "database unavailable"
    assert transport.joined == []

    anyio.run(session.retry)
    assert session.status is SessionStatus.READY
    assert session.error is None
    assert session.stats.total_users == 5


def test_forbidden_channel_degrades_without_failing(transport):
    transport.forbidden.add(ADMIN_CHANNEL)
    session = _session(transport)

    anyio.run(session.mount)

    assert session.status is SessionStatus.READY
    assert session.channels[ADMIN_CHANNEL] is SubscriptionStatus.FORBIDDEN
    assert session.degraded
    assert session.status_payload()["channels"][ADMIN_CHANNEL] == "forbidden"

    transport.emit("private-user-1", "todo-created", {"todoId": 1})
    assert session.stats.total_todos == 11


def test_transport_failure_marks_connection_error(transport):
    transport.failing.add("private-user-1")
    session = _session(transport, admin=False)

    anyio.run(session.mount)

    assert session.channels["private-user-1"] is SubscriptionStatus.FAILED
    assert session.connection_state is ConnectionState.ERROR
    assert session.degraded


def test_teardown_releases_everything_and_ignores_late_events(transport):
    session = _session(transport)
    anyio.run(session.mount)
    deliver = transport.deliverers["private-user-1"]

    session.teardown()
    deliver("user-approved", {"userId": 7})

    assert session.status is SessionStatus.CLOSED
    assert sorted(transport.left) == sorted(["private-user-1", ADMIN_CHANNEL])
    assert transport.disconnects == 1
    assert session.stats.pending_users == 2
    assert session.connection_state is ConnectionState.DISCONNECTED


def test_closed_session_cannot_remount(transport):
    session = _session(transport)
    session.teardown()

    with pytest.raises(RuntimeError):
        anyio.run(session.mount)


def test_resubscribing_replaces_previous_handle(transport):
    adapter = ChannelAdapter(transport)
    received = []

    async def _subscribe_twice():
        first = await adapter.subscribe("private-user-1")
        adapter.bind(first, "notification", received.append)
        deliver_first = transport.deliverers["private-user-1"]
        second = await adapter.subscribe("private-user-1")
        adapter.bind(second, "notification", received.append)
        return first, second, deliver_first

    first, second, deliver_first = anyio.run(_subscribe_twice)

    deliver_first("notification", {"title": "stale"})
    transport.emit("private-user-1", "notification", {"title": "fresh"})

    assert first.status is SubscriptionStatus.CLOSED
    assert second.active
    assert received == [{"title": "fresh"}]
    assert adapter.handles == (second,)
