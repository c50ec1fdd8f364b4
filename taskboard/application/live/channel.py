"""Channel adapter isolating live sessions from the pub/sub transport."""

from __future__ import annotations

import logging
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Protocol

from taskboard.domain.entities import ChannelSubscription

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    INITIALIZED = "initialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"
    DISCONNECTED = "disconnected"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    SUBSCRIBED = "subscribed"
    FORBIDDEN = "forbidden"
    FAILED = "failed"
    CLOSED = "closed"


class SubscriptionForbidden(Exception):
    """Raised by transports when the server refuses a channel subscription."""

    def __init__(self, channel_name: str, reason: str = "Forbidden") -> None:
        super().__init__(f"{reason}: {channel_name}")
        self.channel_name = channel_name
        self.reason = reason


DeliverCallback = Callable[[str, Any], None]
StateCallback = Callable[[ConnectionState, "str | None"], None]
EventCallback = Callable[[Any], Any]


class ChannelTransport(Protocol):
    """Connection to a pub/sub service delivering named events on channels."""

    def connect(self, on_state: StateCallback) -> None: ...

    def join(self, channel_name: str, deliver: DeliverCallback) -> Awaitable[None]: ...

    def leave(self, channel_name: str) -> None: ...

    def disconnect(self) -> None: ...


class ChannelHandle:
    """Handle returned by :meth:`ChannelAdapter.subscribe`."""

    def __init__(self, channel_name: str) -> None:
        self.subscription = ChannelSubscription(channel_name=channel_name)
        self.status = SubscriptionStatus.PENDING
        self.error: str | None = None
        self._callbacks: Dict[str, EventCallback] = {}

    @property
    def channel_name(self) -> str:
        return self.subscription.channel_name

    @property
    def active(self) -> bool:
        return self.status is SubscriptionStatus.SUBSCRIBED

    def __repr__(self) -> str:
        return f"ChannelHandle({self.channel_name!r}, status={self.status.value})"


class ChannelAdapter:
    """Subscribe to channels and route their events to bound callbacks.

    At most one handle is active per channel name; subscribing again
    releases the previous handle first so events are never delivered twice.
    """

    def __init__(self, transport: ChannelTransport) -> None:
        self._transport = transport
        self._handles: Dict[str, ChannelHandle] = {}
        self._state = ConnectionState.INITIALIZED
        self._state_listeners: List[StateCallback] = []
        self._subscription_listeners: List[Callable[[ChannelHandle], None]] = []

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def handles(self) -> tuple[ChannelHandle, ...]:
        return tuple(self._handles.values())

    def on_state_change(self, listener: StateCallback) -> None:
        self._state_listeners.append(listener)

    def on_subscription_change(self, listener: Callable[[ChannelHandle], None]) -> None:
        self._subscription_listeners.append(listener)

    async def subscribe(self, channel_name: str) -> ChannelHandle:
        """Join ``channel_name`` and return its handle.

        A refused subscription leaves the handle ``FORBIDDEN`` and a transport
        failure leaves it ``FAILED``; neither raises.
        """

        existing = self._handles.get(channel_name)
        if existing is not None:
            self.unsubscribe(existing)

        if self._state in (ConnectionState.INITIALIZED, ConnectionState.DISCONNECTED):
            self._set_state(ConnectionState.CONNECTING)
            self._transport.connect(self._set_state)

        handle = ChannelHandle(channel_name)
        self._handles[channel_name] = handle
        try:
            await self._transport.join(channel_name, partial(self._deliver, handle))
        except SubscriptionForbidden as exc:
            logger.warning("Subscription to %s refused: %s", channel_name, exc.reason)
            self._settle(handle, SubscriptionStatus.FORBIDDEN, exc.reason)
            return handle
        except ConnectionError as exc:
            logger.warning("Subscription to %s failed: %s", channel_name, exc)
            self._settle(handle, SubscriptionStatus.FAILED, str(exc))
            self._set_state(ConnectionState.ERROR, str(exc))
            return handle

        if handle.status is SubscriptionStatus.PENDING:
            logger.info("Subscribed to %s", channel_name)
            self._settle(handle, SubscriptionStatus.SUBSCRIBED)
        elif channel_name not in self._handles:
            # Released while the handshake was in flight.
            self._transport.leave(channel_name)
        return handle

    def bind(self, handle: ChannelHandle, event_name: str, callback: EventCallback) -> None:
        handle._callbacks[event_name] = callback
        handle.subscription.bound_event_names.add(event_name)

    def unbind_all(self, handle: ChannelHandle) -> None:
        handle._callbacks.clear()
        handle.subscription.bound_event_names.clear()

    def unsubscribe(self, handle: ChannelHandle) -> None:
        self.unbind_all(handle)
        if handle.status is SubscriptionStatus.CLOSED:
            return
        was_joined = handle.status is SubscriptionStatus.SUBSCRIBED
        self._settle(handle, SubscriptionStatus.CLOSED)
        if self._handles.get(handle.channel_name) is handle:
            del self._handles[handle.channel_name]
        if was_joined:
            self._transport.leave(handle.channel_name)
            logger.info("Unsubscribed from %s", handle.channel_name)

    def close(self) -> None:
        """Release every subscription and disconnect the transport."""

        for handle in list(self._handles.values()):
            self.unsubscribe(handle)
        if self._state not in (ConnectionState.INITIALIZED, ConnectionState.DISCONNECTED):
            self._transport.disconnect()
            self._set_state(ConnectionState.DISCONNECTED)

    def _deliver(self, handle: ChannelHandle, event_name: str, data: Any) -> None:
        if not handle.active:
            logger.debug("Ignoring %s delivered to inactive %s", event_name, handle.channel_name)
            return
        callback = handle._callbacks.get(event_name)
        if callback is None:
            return
        callback(data)

    def _settle(
        self, handle: ChannelHandle, status: SubscriptionStatus, error: str | None = None
    ) -> None:
        handle.status = status
        handle.error = error
        for listener in list(self._subscription_listeners):
            listener(handle)

    def _set_state(self, state: ConnectionState, detail: str | None = None) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in list(self._state_listeners):
            listener(state, detail)


__all__ = [
    "ChannelAdapter",
    "ChannelHandle",
    "ChannelTransport",
    "ConnectionState",
    "DeliverCallback",
    "EventCallback",
    "StateCallback",
    "SubscriptionForbidden",
    "SubscriptionStatus",
]
