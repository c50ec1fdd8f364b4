"""Live session owning the inbox, stats projection and channel subscriptions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Tuple

from taskboard.domain.entities import (
    PendingUser,
    RecentTodo,
    StatsProjection,
    User,
    user_channel_name,
)
from taskboard.utils import utc_now

from .channel import (
    ChannelAdapter,
    ChannelHandle,
    ChannelTransport,
    ConnectionState,
    SubscriptionStatus,
)
from .dispatcher import DISPATCH_TABLE, EventDispatcher, EventLedger, LiveState
from .feed import PendingUsersList, RecentTodoFeed
from .inbox import NotificationInbox
from .payloads import EVENT_ADMIN_NOTIFICATION
from .toasts import ToastRenderer, ToastSurface

logger = logging.getLogger(__name__)

CHANGE_STATE = "state"
CHANGE_STATUS = "status"

# Events bound on the viewer's own channel and on the admin broadcast channel.
USER_CHANNEL_EVENTS: Tuple[str, ...] = tuple(
    name for name in DISPATCH_TABLE if name != EVENT_ADMIN_NOTIFICATION
)
ADMIN_CHANNEL_EVENTS: Tuple[str, ...] = (EVENT_ADMIN_NOTIFICATION,)


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    CLOSED = "closed"


@dataclass(frozen=True)
class Viewer:
    """Identity and role of the person the session renders for."""

    user_id: int
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> "Viewer":
        if user.id is None:
            raise ValueError("Viewer must be a persisted user")
        return cls(user_id=user.id, is_admin=user.is_admin())


@dataclass(frozen=True)
class LiveSnapshot:
    """Server-side state used to seed a session before it subscribes."""

    stats: StatsProjection
    pending: Tuple[PendingUser, ...] = ()
    recent: Tuple[RecentTodo, ...] = ()


SnapshotLoader = Callable[[], Awaitable[LiveSnapshot]]
SessionObserver = Callable[[str], Any]


class LiveSession:
    """Explicitly owned container for one viewer's realtime state."""

    def __init__(
        self,
        viewer: Viewer,
        *,
        transport: ChannelTransport,
        load_snapshot: SnapshotLoader,
        admin_channel: str = "private-admin",
        toast_renderer: ToastRenderer | None = None,
        ledger_size: int = 500,
        bucket_seconds: int = 5,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.viewer = viewer
        self.admin_channel = admin_channel
        self.status = SessionStatus.IDLE
        self.error: str | None = None
        self._load_snapshot = load_snapshot
        self._observers: List[SessionObserver] = []
        self._handles: List[ChannelHandle] = []

        self.state = LiveState()
        self.toasts = ToastSurface(toast_renderer)
        self.adapter = ChannelAdapter(transport)
        self.adapter.on_state_change(self._on_connection_state)
        self.adapter.on_subscription_change(self._on_subscription_change)
        self.dispatcher = EventDispatcher(
            self.state,
            viewer_is_admin=viewer.is_admin,
            toasts=self.toasts,
            ledger=EventLedger(ledger_size),
            bucket_seconds=bucket_seconds,
            clock=clock,
            on_change=self._state_changed,
        )

    @property
    def inbox(self) -> NotificationInbox:
        return self.state.inbox

    @property
    def stats(self) -> StatsProjection:
        return self.state.stats

    @property
    def connection_state(self) -> ConnectionState:
        return self.adapter.connection_state

    @property
    def channels(self) -> dict[str, SubscriptionStatus]:
        return {handle.channel_name: handle.status for handle in self._handles}

    @property
    def degraded(self) -> bool:
        """``True`` while any channel the session needs is not delivering."""

        if self.status is not SessionStatus.READY:
            return False
        return any(handle.status is not SubscriptionStatus.SUBSCRIBED for handle in self._handles)

    def add_observer(self, observer: SessionObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def mount(self) -> None:
        """Seed the session from the snapshot, then subscribe to its channels."""

        if self.status is SessionStatus.CLOSED:
            raise RuntimeError("Cannot mount a closed live session")
        if self.status in (SessionStatus.LOADING, SessionStatus.READY):
            return

        self.error = None
        self._set_status(SessionStatus.LOADING)
        try:
            snapshot = await self._load_snapshot()
        except Exception as exc:
            logger.warning("Snapshot load failed for user %s: %s", self.viewer.user_id, exc)
            self.error = str(exc) or exc.__class__.__name__
            self._set_status(SessionStatus.ERROR)
            return

        if self.status is SessionStatus.CLOSED:
            return
        self._seed(snapshot)
        await self._subscribe()
        if self.status is SessionStatus.CLOSED:
            return
        self._set_status(SessionStatus.READY)

    async def retry(self) -> None:
        if self.status is not SessionStatus.ERROR:
            return
        await self.mount()

    def teardown(self) -> None:
        """Unbind every handler and release every subscription."""

        if self.status is SessionStatus.CLOSED:
            return
        self.dispatcher.deactivate()
        for handle in self._handles:
            self.adapter.unbind_all(handle)
            self.adapter.unsubscribe(handle)
        self.adapter.close()
        self._set_status(SessionStatus.CLOSED)
        self._observers.clear()
        logger.info("Live session for user %s closed", self.viewer.user_id)

    def mark_read(self, record_id: str) -> bool:
        return self._mutate(self.state.inbox.mark_read(record_id))

    def mark_all_read(self) -> bool:
        return self._mutate(self.state.inbox.mark_all_read() > 0)

    def clear_notification(self, record_id: str) -> bool:
        return self._mutate(self.state.inbox.remove(record_id))

    def clear_all(self) -> bool:
        return self._mutate(self.state.inbox.clear_all() > 0)

    def dismiss_toast(self, toast_id: str) -> bool:
        return self.toasts.dismiss(toast_id)

    def as_payload(self) -> dict[str, Any]:
        """Return the renderable view of the session state."""

        stats = self.state.stats
        payload: dict[str, Any] = {
            "status": self.status.value,
            "error": self.error,
            "notifications": self.state.inbox.as_payload(),
        }
        if self.viewer.is_admin:
            payload["stats"] = {
                "totalUsers": stats.total_users,
                "pendingUsers": stats.pending_users,
                "totalTodos": stats.total_todos,
                "completedTodos": stats.completed_todos,
                "completionRate": stats.completion_rate,
            }
            payload["pendingUsers"] = self.state.pending.as_payload()
            payload["recentTodos"] = self.state.recent.as_payload()
        return payload

    def status_payload(self) -> dict[str, Any]:
        return {
            "session": self.status.value,
            "connection": self.connection_state.value,
            "degraded": self.degraded,
            "channels": {name: status.value for name, status in self.channels.items()},
        }

    def _seed(self, snapshot: LiveSnapshot) -> None:
        self.state.stats = StatsProjection.from_counts(
            total_users=snapshot.stats.total_users,
            pending_users=snapshot.stats.pending_users,
            total_todos=snapshot.stats.total_todos,
            completed_todos=snapshot.stats.completed_todos,
        )
        self.state.pending = PendingUsersList(snapshot.pending)
        self.state.recent = RecentTodoFeed(snapshot.recent)

    async def _subscribe(self) -> None:
        plan: list[tuple[str, Iterable[str]]] = [
            (user_channel_name(self.viewer.user_id), USER_CHANNEL_EVENTS)
        ]
        if self.viewer.is_admin:
            plan.append((self.admin_channel, ADMIN_CHANNEL_EVENTS))

        self.dispatcher.activate()
        for channel_name, event_names in plan:
            handle = await self.adapter.subscribe(channel_name)
            self._handles = [h for h in self._handles if h.channel_name != channel_name]
            self._handles.append(handle)
            if self.status is SessionStatus.CLOSED:
                self.adapter.unsubscribe(handle)
                return
            for event_name in event_names:
                self.adapter.bind(handle, event_name, self.dispatcher.handler_for(event_name))

    def _mutate(self, changed: bool) -> bool:
        if changed:
            self._state_changed()
        return changed

    def _state_changed(self) -> None:
        self._notify(CHANGE_STATE)

    def _set_status(self, status: SessionStatus) -> None:
        self.status = status
        self._notify(CHANGE_STATUS)

    def _on_connection_state(self, state: ConnectionState, detail: str | None) -> None:
        logger.info("Live session for user %s is %s", self.viewer.user_id, state.value)
        self._notify(CHANGE_STATUS)

    def _on_subscription_change(self, handle: ChannelHandle) -> None:
        self._notify(CHANGE_STATUS)

    def _notify(self, change: str) -> None:
        for observer in list(self._observers):
            observer(change)


__all__ = [
    "ADMIN_CHANNEL_EVENTS",
    "CHANGE_STATE",
    "CHANGE_STATUS",
    "LiveSession",
    "LiveSnapshot",
    "SessionObserver",
    "SessionStatus",
    "SnapshotLoader",
    "USER_CHANNEL_EVENTS",
    "Viewer",
]
