"""Transient alerts rendered next to the inbox."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict
from uuid import uuid4

from taskboard.domain.entities import (
    NOTIFICATION_ERROR,
    NOTIFICATION_INFO,
    NOTIFICATION_SUCCESS,
    NOTIFICATION_WARNING,
    RECENT_TODO_COMPLETED,
    RECENT_TODO_CREATED,
    RECENT_TODO_DELETED,
    RECENT_TODO_UPDATED,
    NotificationAction,
)

from .payloads import (
    EventPayload,
    NotificationPayload,
    RecentTodoPayload,
    UserRegisteredPayload,
)

logger = logging.getLogger(__name__)

TOAST_DURATIONS: Dict[str, float] = {
    NOTIFICATION_SUCCESS: 4.0,
    NOTIFICATION_INFO: 4.0,
    NOTIFICATION_WARNING: 5.0,
    NOTIFICATION_ERROR: 6.0,
}

MAX_VISIBLE_TOASTS = 3

_RECENT_TODO_TOASTS: Dict[str, tuple[str, str]] = {
    RECENT_TODO_CREATED: (NOTIFICATION_INFO, "New Task Created"),
    RECENT_TODO_UPDATED: (NOTIFICATION_INFO, "Task Updated"),
    RECENT_TODO_COMPLETED: (NOTIFICATION_SUCCESS, "Task Completed"),
    RECENT_TODO_DELETED: (NOTIFICATION_WARNING, "Task Deleted"),
}


@dataclass(frozen=True)
class Toast:
    id: str
    kind: str
    title: str
    description: str | None
    duration: float
    action: NotificationAction | None = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "action": (
                {"label": self.action.label, "url": self.action.target}
                if self.action is not None
                else None
            ),
        }


ToastRenderer = Callable[[Toast], Any]


class ToastSurface:
    """Fire-and-forget alerts handed to a renderer.

    The surface never touches the inbox. Expiry is left to the renderer,
    which receives the duration with each toast; the surface only keeps
    the most recent ones so they can be dismissed.
    """

    def __init__(self, renderer: ToastRenderer | None = None) -> None:
        self._renderer = renderer
        self._visible: list[Toast] = []

    def show(
        self,
        kind: str,
        title: str,
        description: str | None = None,
        *,
        action: NotificationAction | None = None,
    ) -> Toast:
        toast = Toast(
            id=uuid4().hex,
            kind=kind,
            title=title,
            description=description,
            duration=TOAST_DURATIONS.get(kind, TOAST_DURATIONS[NOTIFICATION_INFO]),
            action=action,
        )
        self._visible.insert(0, toast)
        del self._visible[MAX_VISIBLE_TOASTS:]
        if self._renderer is not None:
            try:
                self._renderer(toast)
            except Exception:
                logger.exception("Toast renderer failed for %s", toast.title)
        return toast

    def success(self, title: str, description: str | None = None) -> Toast:
        return self.show(NOTIFICATION_SUCCESS, title, description)

    def info(self, title: str, description: str | None = None) -> Toast:
        return self.show(NOTIFICATION_INFO, title, description)

    def warning(self, title: str, description: str | None = None) -> Toast:
        return self.show(NOTIFICATION_WARNING, title, description)

    def error(self, title: str, description: str | None = None) -> Toast:
        return self.show(NOTIFICATION_ERROR, title, description)

    def dismiss(self, toast_id: str) -> bool:
        for toast in self._visible:
            if toast.id == toast_id:
                self._visible.remove(toast)
                return True
        return False

    @property
    def visible(self) -> tuple[Toast, ...]:
        return tuple(self._visible)


def show_event_toast(surface: ToastSurface, payload: EventPayload) -> Toast | None:
    """Render the toast associated with ``payload``, if it has one."""

    if isinstance(payload, NotificationPayload):
        action = payload.action.to_entity() if payload.action is not None else None
        return surface.show(payload.kind, payload.title, payload.message or None, action=action)
    if isinstance(payload, UserRegisteredPayload):
        name = payload.user_name or payload.user_email
        return surface.info(
            "New User Registration",
            f"{name} ({payload.user_email}) has registered and is pending approval.",
        )
    if isinstance(payload, RecentTodoPayload):
        kind, title = _RECENT_TODO_TOASTS[payload.action]
        owner = payload.user_name or "a user"
        return surface.show(kind, title, f'"{payload.todo_title}" by {owner}')
    return None


__all__ = [
    "MAX_VISIBLE_TOASTS",
    "TOAST_DURATIONS",
    "Toast",
    "ToastRenderer",
    "ToastSurface",
    "show_event_toast",
]
