"""Classify realtime events and apply them to the live state exactly once."""

from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict

from taskboard.domain.entities import NotificationRecord, StatsProjection
from taskboard.utils import as_utc, utc_now

from .feed import PendingUsersList, RecentTodoFeed
from .inbox import NotificationInbox
from .payloads import (
    EVENT_ADMIN_NOTIFICATION,
    EVENT_NOTIFICATION,
    EVENT_RECENT_TODO,
    EVENT_TODO_COMPLETED,
    EVENT_TODO_CREATED,
    EVENT_TODO_DELETED,
    EVENT_USER_APPROVED,
    EVENT_USER_REGISTERED,
    EVENT_USER_REJECTED,
    EventPayload,
    MalformedEvent,
    NotificationPayload,
    RecentTodoPayload,
    TodoCompletedPayload,
    UserRegisteredPayload,
    parse_event,
)
from .projection import apply_event
from .toasts import ToastSurface, show_event_toast

logger = logging.getLogger(__name__)

PENDING_ADD = "add"
PENDING_REMOVE = "remove"


@dataclass(frozen=True)
class EventRoute:
    """Targets touched by one event name."""

    inbox: bool = False
    projection: bool = False
    pending: str | None = None
    feed: bool = False
    toast: bool = False
    admin_only: bool = False


DISPATCH_TABLE: Dict[str, EventRoute] = {
    EVENT_NOTIFICATION: EventRoute(inbox=True, toast=True),
    EVENT_ADMIN_NOTIFICATION: EventRoute(inbox=True, admin_only=True),
    EVENT_USER_REGISTERED: EventRoute(
        projection=True, pending=PENDING_ADD, toast=True, admin_only=True
    ),
    EVENT_USER_APPROVED: EventRoute(projection=True, pending=PENDING_REMOVE, admin_only=True),
    EVENT_USER_REJECTED: EventRoute(projection=True, pending=PENDING_REMOVE, admin_only=True),
    EVENT_TODO_CREATED: EventRoute(projection=True, admin_only=True),
    EVENT_TODO_COMPLETED: EventRoute(projection=True, admin_only=True),
    EVENT_TODO_DELETED: EventRoute(projection=True, admin_only=True),
    EVENT_RECENT_TODO: EventRoute(feed=True, toast=True, admin_only=True),
}

# Lifecycle events that can happen at most once per entity.
_ONE_SHOT_ENTITY_FIELDS: Dict[str, str] = {
    EVENT_USER_REGISTERED: "user_id",
    EVENT_USER_APPROVED: "user_id",
    EVENT_USER_REJECTED: "user_id",
    EVENT_TODO_CREATED: "todo_id",
    EVENT_TODO_DELETED: "todo_id",
}


class EventLedger:
    """Bounded record of the event keys already applied.

    The oldest key is evicted once ``max_size`` keys are held.
    """

    def __init__(self, max_size: int = 500) -> None:
        if max_size <= 0:
            raise ValueError("Ledger size must be positive")
        self._max_size = max_size
        self._keys: "OrderedDict[str, None]" = OrderedDict()

    def record(self, key: str) -> bool:
        """Store ``key`` and return ``False`` when it was already recorded."""

        if key in self._keys:
            return False
        self._keys[key] = None
        while len(self._keys) > self._max_size:
            self._keys.popitem(last=False)
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


def derive_event_key(
    event_name: str,
    payload: EventPayload,
    *,
    received_at: datetime,
    bucket_seconds: int,
) -> str:
    """Return the identity used to recognise a redelivered event.

    An explicit ``eventId`` wins. One-shot lifecycle events fall back to
    their entity id; anything else is keyed on its entity, action and the
    timestamp bucket it falls into.
    """

    if payload.event_id:
        return f"{event_name}:{payload.event_id}"

    entity_field = _ONE_SHOT_ENTITY_FIELDS.get(event_name)
    if entity_field is not None:
        return f"{event_name}:{getattr(payload, entity_field)}"

    moment = as_utc(payload.timestamp) or as_utc(received_at)
    bucket = int(moment.timestamp()) // bucket_seconds

    if isinstance(payload, TodoCompletedPayload):
        return f"{event_name}:{payload.todo_id}:{payload.completed}:{bucket}"
    if isinstance(payload, RecentTodoPayload):
        return f"{event_name}:{payload.todo_id}:{payload.action}:{bucket}"
    if isinstance(payload, NotificationPayload):
        digest = hashlib.sha1(
            f"{payload.kind}\x1f{payload.title}\x1f{payload.message}".encode("utf-8")
        ).hexdigest()[:16]
        return f"{event_name}:{digest}:{bucket}"
    return f"{event_name}:{bucket}"


@dataclass
class LiveState:
    """Mutable state owned by one live session."""

    inbox: NotificationInbox = field(default_factory=NotificationInbox)
    stats: StatsProjection = field(default_factory=StatsProjection)
    pending: PendingUsersList = field(default_factory=PendingUsersList)
    recent: RecentTodoFeed = field(default_factory=RecentTodoFeed)


class EventDispatcher:
    """Route validated events to the inbox, projection, lists and toasts."""

    def __init__(
        self,
        state: LiveState,
        *,
        viewer_is_admin: bool,
        toasts: ToastSurface | None = None,
        ledger: EventLedger | None = None,
        bucket_seconds: int = 5,
        clock: Callable[[], datetime] = utc_now,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.state = state
        self.viewer_is_admin = viewer_is_admin
        self.toasts = toasts
        self.ledger = ledger if ledger is not None else EventLedger()
        self._bucket_seconds = bucket_seconds
        self._clock = clock
        self._on_change = on_change
        self._subscribed = False

    @property
    def subscribed(self) -> bool:
        return self._subscribed

    def activate(self) -> None:
        self._subscribed = True

    def deactivate(self) -> None:
        self._subscribed = False

    def handler_for(self, event_name: str) -> Callable[[Any], bool]:
        """Return a channel callback that dispatches ``event_name``."""

        def _handle(data: Any) -> bool:
            return self.dispatch(event_name, data)

        return _handle

    def dispatch(self, event_name: str, data: Any) -> bool:
        """Apply one inbound event and return ``True`` when it changed state."""

        if not self._subscribed:
            logger.debug("Ignoring %s received while unsubscribed", event_name)
            return False

        route = DISPATCH_TABLE.get(event_name)
        if route is None:
            logger.warning("Dropping unknown realtime event %s", event_name)
            return False
        if route.admin_only and not self.viewer_is_admin:
            logger.debug("Dropping admin-only event %s for non-admin viewer", event_name)
            return False

        try:
            payload = parse_event(event_name, data)
        except MalformedEvent as exc:
            logger.warning("%s", exc)
            return False

        received_at = self._clock()
        key = derive_event_key(
            event_name,
            payload,
            received_at=received_at,
            bucket_seconds=self._bucket_seconds,
        )
        if not self.ledger.record(key):
            logger.debug("Ignoring duplicate delivery %s", key)
            return False

        self._apply(event_name, route, payload, key=key, received_at=received_at)
        logger.debug("Applied %s", key)

        if route.toast and self.toasts is not None:
            show_event_toast(self.toasts, payload)
        if self._on_change is not None:
            self._on_change()
        return True

    def _apply(
        self,
        event_name: str,
        route: EventRoute,
        payload: EventPayload,
        *,
        key: str,
        received_at: datetime,
    ) -> None:
        state = self.state
        if route.inbox and isinstance(payload, NotificationPayload):
            state.inbox.insert(
                NotificationRecord(
                    id=key,
                    kind=payload.kind,
                    title=payload.title,
                    message=payload.message,
                    created_at=payload.timestamp or received_at,
                    action=payload.action.to_entity() if payload.action is not None else None,
                )
            )
        if route.projection:
            state.stats = apply_event(state.stats, event_name, payload)
        if route.pending == PENDING_ADD and isinstance(payload, UserRegisteredPayload):
            state.pending.add(payload)
        elif route.pending == PENDING_REMOVE:
            state.pending.remove(getattr(payload, "user_id"))
        if route.feed and isinstance(payload, RecentTodoPayload):
            state.recent.apply(payload)


__all__ = [
    "DISPATCH_TABLE",
    "EventDispatcher",
    "EventLedger",
    "EventRoute",
    "LiveState",
    "PENDING_ADD",
    "PENDING_REMOVE",
    "derive_event_key",
]
