"""Domain helpers describing realtime channel subscriptions."""

from __future__ import annotations

from dataclasses import dataclass, field

USER_CHANNEL_PREFIX = "private-user-"


def user_channel_name(user_id: int | str) -> str:
    """Return the private channel that carries events for ``user_id``."""

    return f"{USER_CHANNEL_PREFIX}{user_id}"


def parse_user_channel(channel_name: str) -> int | None:
    """Return the user id encoded in ``channel_name`` or ``None``."""

    if not channel_name.startswith(USER_CHANNEL_PREFIX):
        return None
    suffix = channel_name[len(USER_CHANNEL_PREFIX) :]
    if not suffix.isdigit():
        return None
    return int(suffix)


@dataclass
class ChannelSubscription:
    """An active subscription together with the event names bound on it."""

    channel_name: str
    bound_event_names: set[str] = field(default_factory=set)


__all__ = [
    "USER_CHANNEL_PREFIX",
    "ChannelSubscription",
    "parse_user_channel",
    "user_channel_name",
]
