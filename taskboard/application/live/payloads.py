"""Pydantic models validating inbound realtime payloads.

Every event name maps to exactly one model. The models form a tagged union on
the ``event`` field, so an unknown name or a payload that does not match its
schema is rejected as a whole before any state is touched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from taskboard.domain.entities import NOTIFICATION_INFO, NOTIFICATION_KINDS, NotificationAction

EVENT_NOTIFICATION = "notification"
EVENT_ADMIN_NOTIFICATION = "admin-notification"
EVENT_USER_REGISTERED = "user-registered"
EVENT_USER_APPROVED = "user-approved"
EVENT_USER_REJECTED = "user-rejected"
EVENT_TODO_CREATED = "todo-created"
EVENT_TODO_COMPLETED = "todo-completed"
EVENT_TODO_DELETED = "todo-deleted"
EVENT_RECENT_TODO = "recent-todo"


class MalformedEvent(ValueError):
    """Raised when an inbound payload does not match the schema for its event."""

    def __init__(self, event_name: str, detail: str) -> None:
        super().__init__(f"Malformed '{event_name}' payload: {detail}")
        self.event_name = event_name
        self.detail = detail


class EventPayload(BaseModel):
    """Fields shared by every payload published by the service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    event_id: str | None = Field(default=None, alias="eventId")
    timestamp: datetime | None = None


class ActionPayload(BaseModel):
    label: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)

    def to_entity(self) -> NotificationAction:
        return NotificationAction(label=self.label, target=self.url)


class NotificationPayload(EventPayload):
    event: Literal["notification"] = EVENT_NOTIFICATION
    kind: str = Field(default=NOTIFICATION_INFO, alias="type")
    title: str = Field(..., min_length=1)
    message: str = ""
    action: ActionPayload | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> str:
        if isinstance(value, str) and value.lower() in NOTIFICATION_KINDS:
            return value.lower()
        return NOTIFICATION_INFO

    @field_validator("action", mode="before")
    @classmethod
    def _drop_incomplete_action(cls, value: Any) -> Any:
        # An action without a label or a target renders as a plain notification.
        if not isinstance(value, dict):
            return None
        if not value.get("label") or not value.get("url"):
            return None
        return value


class AdminNotificationPayload(NotificationPayload):
    event: Literal["admin-notification"] = EVENT_ADMIN_NOTIFICATION


class UserRegisteredPayload(EventPayload):
    event: Literal["user-registered"] = EVENT_USER_REGISTERED
    user_id: int = Field(..., alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    user_email: str = Field(..., alias="userEmail")


class UserApprovedPayload(EventPayload):
    event: Literal["user-approved"] = EVENT_USER_APPROVED
    user_id: int = Field(..., alias="userId")


class UserRejectedPayload(EventPayload):
    event: Literal["user-rejected"] = EVENT_USER_REJECTED
    user_id: int = Field(..., alias="userId")


class TodoCreatedPayload(EventPayload):
    event: Literal["todo-created"] = EVENT_TODO_CREATED
    todo_id: int = Field(..., alias="todoId")
    user_id: int | None = Field(default=None, alias="userId")


class TodoCompletedPayload(EventPayload):
    event: Literal["todo-completed"] = EVENT_TODO_COMPLETED
    todo_id: int = Field(..., alias="todoId")
    user_id: int | None = Field(default=None, alias="userId")
    completed: bool


class TodoDeletedPayload(EventPayload):
    event: Literal["todo-deleted"] = EVENT_TODO_DELETED
    todo_id: int = Field(..., alias="todoId")
    user_id: int | None = Field(default=None, alias="userId")
    was_completed: bool = Field(..., alias="wasCompleted")


class RecentTodoPayload(EventPayload):
    event: Literal["recent-todo"] = EVENT_RECENT_TODO
    todo_id: int = Field(..., alias="todoId")
    todo_title: str = Field(..., alias="todoTitle")
    user_id: int | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    action: Literal["created", "updated", "completed", "deleted"]


LiveEvent = Annotated[
    Union[
        NotificationPayload,
        AdminNotificationPayload,
        UserRegisteredPayload,
        UserApprovedPayload,
        UserRejectedPayload,
        TodoCreatedPayload,
        TodoCompletedPayload,
        TodoDeletedPayload,
        RecentTodoPayload,
    ],
    Field(discriminator="event"),
]

_LIVE_EVENT_ADAPTER: TypeAdapter[LiveEvent] = TypeAdapter(LiveEvent)


def parse_event(event_name: str, data: Any) -> EventPayload:
    """Validate ``data`` against the schema registered for ``event_name``."""

    if not isinstance(data, dict):
        raise MalformedEvent(event_name, "payload must be a JSON object")
    try:
        return _LIVE_EVENT_ADAPTER.validate_python({**data, "event": event_name})
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'payload'}: {error['msg']}"
            for error in exc.errors()
        )
        raise MalformedEvent(event_name, errors) from exc


__all__ = [
    "EVENT_ADMIN_NOTIFICATION",
    "EVENT_NOTIFICATION",
    "EVENT_RECENT_TODO",
    "EVENT_TODO_COMPLETED",
    "EVENT_TODO_CREATED",
    "EVENT_TODO_DELETED",
    "EVENT_USER_APPROVED",
    "EVENT_USER_REGISTERED",
    "EVENT_USER_REJECTED",
    "ActionPayload",
    "AdminNotificationPayload",
    "EventPayload",
    "LiveEvent",
    "MalformedEvent",
    "NotificationPayload",
    "RecentTodoPayload",
    "TodoCompletedPayload",
    "TodoCreatedPayload",
    "TodoDeletedPayload",
    "UserApprovedPayload",
    "UserRegisteredPayload",
    "UserRejectedPayload",
    "parse_event",
]
