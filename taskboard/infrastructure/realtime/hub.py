"""Channel hub delivering realtime events to websocket and in-process subscribers."""

from __future__ import annotations

import copy
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict
from uuid import uuid4

from fastapi import WebSocket

from taskboard.infrastructure.security import verify_channel_grant

logger = logging.getLogger(__name__)

ChannelListener = Callable[[str, str, Dict[str, Any]], Any]


class ChannelForbidden(Exception):
    """Raised when a socket is not allowed to join a channel."""

    def __init__(self, channel_name: str, reason: str = "Forbidden") -> None:
        super().__init__(f"{reason}: {channel_name}")
        self.channel_name = channel_name
        self.reason = reason


class ChannelHub:
    """Manage channel subscriptions grouped by channel name."""

    def __init__(self) -> None:
        self._channels: DefaultDict[str, Dict[str, ChannelListener]] = defaultdict(dict)
        self._sockets: Dict[str, WebSocket | None] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept ``websocket`` and return the socket id assigned to it."""

        await websocket.accept()
        socket_id = self._new_socket_id()
        self._sockets[socket_id] = websocket
        return socket_id

    def register_socket(self) -> str:
        """Return a socket id for an in-process subscriber."""

        socket_id = self._new_socket_id()
        self._sockets[socket_id] = None
        return socket_id

    def disconnect(self, socket_id: str) -> None:
        """Drop ``socket_id`` and every subscription it holds."""

        self._sockets.pop(socket_id, None)
        for channel_name in list(self._channels):
            self._remove(channel_name, socket_id)

    def subscribe(
        self,
        channel_name: str,
        *,
        socket_id: str,
        grant: str,
        listener: ChannelListener,
    ) -> None:
        """Register ``listener`` for ``channel_name`` once ``grant`` is verified."""

        if socket_id not in self._sockets:
            raise ChannelForbidden(channel_name, "Unknown socket")
        try:
            verify_channel_grant(grant, socket_id=socket_id, channel_name=channel_name)
        except ValueError as exc:
            raise ChannelForbidden(channel_name, str(exc)) from exc

        self._channels[channel_name][socket_id] = listener
        logger.info("Socket %s subscribed to %s", socket_id, channel_name)

    def unsubscribe(self, channel_name: str, socket_id: str) -> None:
        """Remove the subscription of ``socket_id`` to ``channel_name``."""

        if self._remove(channel_name, socket_id):
            logger.info("Socket %s unsubscribed from %s", socket_id, channel_name)

    def is_subscribed(self, channel_name: str, socket_id: str) -> bool:
        return socket_id in self._channels.get(channel_name, {})

    def subscriber_count(self, channel_name: str) -> int:
        return len(self._channels.get(channel_name, {}))

    async def trigger(self, channel_name: str, event: str, data: dict[str, Any]) -> None:
        """Deliver ``event`` with ``data`` to every subscriber of ``channel_name``."""

        listeners = list(self._channels.get(channel_name, {}).items())
        for socket_id, listener in listeners:
            try:
                result = listener(channel_name, event, copy.deepcopy(data))
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Dropping subscriber %s of %s after a failed delivery",
                    socket_id,
                    channel_name,
                )
                self._remove(channel_name, socket_id)

    def _remove(self, channel_name: str, socket_id: str) -> bool:
        listeners = self._channels.get(channel_name)
        if listeners is None or socket_id not in listeners:
            return False
        listeners.pop(socket_id, None)
        if not listeners:
            self._channels.pop(channel_name, None)
        return True

    @staticmethod
    def _new_socket_id() -> str:
        return uuid4().hex


def websocket_listener(websocket: WebSocket) -> ChannelListener:
    """Return a listener forwarding channel events as JSON frames to ``websocket``."""

    async def _forward(channel_name: str, event: str, data: dict[str, Any]) -> None:
        await websocket.send_json({"channel": channel_name, "event": event, "data": data})

    return _forward


channel_hub = ChannelHub()


__all__ = [
    "ChannelForbidden",
    "ChannelHub",
    "ChannelListener",
    "channel_hub",
    "websocket_listener",
]
