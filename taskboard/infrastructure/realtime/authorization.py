"""Channel authorization for realtime subscriptions."""

from __future__ import annotations

import logging

from taskboard.config import get_settings
from taskboard.domain.entities import User, user_channel_name
from taskboard.infrastructure.security import create_channel_grant

from .hub import ChannelForbidden

logger = logging.getLogger(__name__)


def can_join_channel(user: User, channel_name: str) -> bool:
    """Return ``True`` when ``user`` may subscribe to ``channel_name``."""

    if user.id is None or not user.approved:
        return False
    if channel_name == user_channel_name(user.id):
        return True
    return channel_name == get_settings().admin_channel and user.is_admin()


def authorize_channel(user: User, *, socket_id: str, channel_name: str) -> str:
    """Return a signed grant for ``socket_id`` or raise :class:`ChannelForbidden`."""

    if not socket_id or not can_join_channel(user, channel_name):
        logger.warning(
            "Rejected subscription of user %s to channel %s", user.id, channel_name
        )
        raise ChannelForbidden(channel_name)
    return create_channel_grant(
        socket_id=socket_id, channel_name=channel_name, user_id=user.id
    )


__all__ = ["authorize_channel", "can_join_channel"]
