"""Domain entities exposed by the application."""

from .channel import (
    USER_CHANNEL_PREFIX,
    ChannelSubscription,
    parse_user_channel,
    user_channel_name,
)
from .notification import (
    NOTIFICATION_ERROR,
    NOTIFICATION_INFO,
    NOTIFICATION_KINDS,
    NOTIFICATION_SUCCESS,
    NOTIFICATION_WARNING,
    NotificationAction,
    NotificationRecord,
)
from .recent_todo import (
    RECENT_TODO_ACTIONS,
    RECENT_TODO_COMPLETED,
    RECENT_TODO_CREATED,
    RECENT_TODO_DELETED,
    RECENT_TODO_UPDATED,
    RecentTodo,
)
from .stats import StatsProjection, compute_completion_rate
from .todo import Todo
from .user import ROLE_ADMIN, ROLE_USER, ROLES, PendingUser, User

__all__ = [
    "USER_CHANNEL_PREFIX",
    "ChannelSubscription",
    "parse_user_channel",
    "user_channel_name",
    "NOTIFICATION_ERROR",
    "NOTIFICATION_INFO",
    "NOTIFICATION_KINDS",
    "NOTIFICATION_SUCCESS",
    "NOTIFICATION_WARNING",
    "NotificationAction",
    "NotificationRecord",
    "RECENT_TODO_ACTIONS",
    "RECENT_TODO_COMPLETED",
    "RECENT_TODO_CREATED",
    "RECENT_TODO_DELETED",
    "RECENT_TODO_UPDATED",
    "RecentTodo",
    "StatsProjection",
    "compute_completion_rate",
    "Todo",
    "ROLE_ADMIN",
    "ROLE_USER",
    "ROLES",
    "PendingUser",
    "User",
]
