"""Domain entity representing an inbox notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_INFO = "info"
NOTIFICATION_SUCCESS = "success"
NOTIFICATION_WARNING = "warning"
NOTIFICATION_ERROR = "error"
NOTIFICATION_KINDS = (
    NOTIFICATION_INFO,
    NOTIFICATION_SUCCESS,
    NOTIFICATION_WARNING,
    NOTIFICATION_ERROR,
)


@dataclass(frozen=True)
class NotificationAction:
    """Optional call to action rendered next to a notification."""

    label: str
    target: str


@dataclass
class NotificationRecord:
    """Information message shown in the viewer's inbox for the session."""

    id: str
    kind: str
    title: str
    message: str
    created_at: datetime
    read: bool = False
    action: NotificationAction | None = None


__all__ = [
    "NOTIFICATION_ERROR",
    "NOTIFICATION_INFO",
    "NOTIFICATION_KINDS",
    "NOTIFICATION_SUCCESS",
    "NOTIFICATION_WARNING",
    "NotificationAction",
    "NotificationRecord",
]
