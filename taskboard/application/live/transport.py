"""Channel transport backed by the in-process channel hub."""

from __future__ import annotations

import logging
from typing import Any

from taskboard.domain.entities import User
from taskboard.infrastructure.realtime import ChannelForbidden, ChannelHub, authorize_channel

from .channel import ConnectionState, DeliverCallback, StateCallback, SubscriptionForbidden

logger = logging.getLogger(__name__)


class HubTransport:
    """Join hub channels on behalf of ``user`` through the grant handshake."""

    def __init__(self, hub: ChannelHub, user: User) -> None:
        self._hub = hub
        self._user = user
        self._socket_id: str | None = None
        self._on_state: StateCallback | None = None

    @property
    def socket_id(self) -> str | None:
        return self._socket_id

    def connect(self, on_state: StateCallback) -> None:
        self._on_state = on_state
        if self._socket_id is None:
            self._socket_id = self._hub.register_socket()
        on_state(ConnectionState.CONNECTED, None)

    async def join(self, channel_name: str, deliver: DeliverCallback) -> None:
        if self._socket_id is None:
            raise ConnectionError("Transport is not connected")

        def _listener(_channel: str, event: str, data: dict[str, Any]) -> None:
            deliver(event, data)

        try:
            grant = authorize_channel(
                self._user, socket_id=self._socket_id, channel_name=channel_name
            )
            self._hub.subscribe(
                channel_name,
                socket_id=self._socket_id,
                grant=grant,
                listener=_listener,
            )
        except ChannelForbidden as exc:
            raise SubscriptionForbidden(channel_name, exc.reason) from exc

    def leave(self, channel_name: str) -> None:
        if self._socket_id is not None:
            self._hub.unsubscribe(channel_name, self._socket_id)

    def disconnect(self) -> None:
        if self._socket_id is not None:
            self._hub.disconnect(self._socket_id)
            self._socket_id = None
        if self._on_state is not None:
            self._on_state(ConnectionState.DISCONNECTED, None)


__all__ = ["HubTransport"]
