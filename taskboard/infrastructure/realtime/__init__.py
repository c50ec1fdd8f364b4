"""Realtime channel helpers for the infrastructure layer."""

from .authorization import authorize_channel, can_join_channel
from .hub import (
    ChannelForbidden,
    ChannelHub,
    ChannelListener,
    channel_hub,
    websocket_listener,
)
from .publisher import (
    RealtimeEventPublisher,
    dispatch_realtime_event,
    realtime_event_publisher,
    stamp_payload,
)

__all__ = [
    "authorize_channel",
    "can_join_channel",
    "ChannelForbidden",
    "ChannelHub",
    "ChannelListener",
    "channel_hub",
    "websocket_listener",
    "RealtimeEventPublisher",
    "dispatch_realtime_event",
    "realtime_event_publisher",
    "stamp_payload",
]
