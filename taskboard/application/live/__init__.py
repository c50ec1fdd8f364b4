"""Realtime reconciliation engine keeping a viewer's live state in sync."""

from .channel import (
    ChannelAdapter,
    ChannelHandle,
    ChannelTransport,
    ConnectionState,
    SubscriptionForbidden,
    SubscriptionStatus,
)
from .dispatcher import (
    DISPATCH_TABLE,
    EventDispatcher,
    EventLedger,
    EventRoute,
    LiveState,
    derive_event_key,
)
from .feed import RECENT_TODO_LIMIT, PendingUsersList, RecentTodoFeed
from .inbox import NotificationInbox
from .payloads import MalformedEvent, parse_event
from .projection import PROJECTION_REDUCERS, apply_event
from .session import (
    CHANGE_STATE,
    CHANGE_STATUS,
    LiveSession,
    LiveSnapshot,
    SessionStatus,
    Viewer,
)
from .toasts import TOAST_DURATIONS, Toast, ToastSurface
from .transport import HubTransport

__all__ = [
    "ChannelAdapter",
    "ChannelHandle",
    "ChannelTransport",
    "ConnectionState",
    "SubscriptionForbidden",
    "SubscriptionStatus",
    "DISPATCH_TABLE",
    "EventDispatcher",
    "EventLedger",
    "EventRoute",
    "LiveState",
    "derive_event_key",
    "RECENT_TODO_LIMIT",
    "PendingUsersList",
    "RecentTodoFeed",
    "NotificationInbox",
    "MalformedEvent",
    "parse_event",
    "PROJECTION_REDUCERS",
    "apply_event",
    "CHANGE_STATE",
    "CHANGE_STATUS",
    "LiveSession",
    "LiveSnapshot",
    "SessionStatus",
    "Viewer",
    "TOAST_DURATIONS",
    "Toast",
    "ToastSurface",
    "HubTransport",
]
