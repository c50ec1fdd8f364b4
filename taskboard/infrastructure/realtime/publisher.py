"""Helpers to trigger realtime events on named channels."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Iterable, Set
from uuid import uuid4

from anyio import from_thread

from taskboard.utils import now_in_app_timezone

from .hub import ChannelHub, channel_hub

logger = logging.getLogger(__name__)


def stamp_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` carrying an ``eventId`` and a ``timestamp``."""

    stamped = copy.deepcopy(payload)
    stamped.setdefault("eventId", uuid4().hex)
    stamped.setdefault("timestamp", now_in_app_timezone().isoformat())
    return stamped


class RealtimeEventPublisher:
    """Dispatch structured realtime events to channel subscribers."""

    def __init__(self, hub: ChannelHub) -> None:
        self._hub = hub
        self._tasks: Set[asyncio.Task] = set()

    def dispatch(self, channel_name: str, *, event: str, payload: dict[str, Any]) -> None:
        """Schedule ``event`` on ``channel_name``."""

        if not channel_name:
            return
        self._schedule_send(channel_name, event, stamp_payload(payload))

    def dispatch_many(
        self,
        channel_names: Iterable[str],
        *,
        event: str,
        payload: dict[str, Any],
    ) -> None:
        """Broadcast one event, with a single identity, to several channels."""

        stamped = stamp_payload(payload)
        seen: Set[str] = set()
        for channel_name in channel_names:
            if not channel_name or channel_name in seen:
                continue
            seen.add(channel_name)
            self._schedule_send(channel_name, event, stamped)

    def _schedule_send(self, channel_name: str, event: str, payload: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._hub.trigger, channel_name, event, payload)
            except RuntimeError:
                logger.warning(
                    "No event loop available, dropped %s event for %s", event, channel_name
                )
        else:
            task = loop.create_task(self._hub.trigger(channel_name, event, payload))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)


realtime_event_publisher = RealtimeEventPublisher(channel_hub)


def dispatch_realtime_event(
    channel_names: Iterable[str], *, event: str, payload: dict[str, Any]
) -> None:
    """Public helper to broadcast realtime events to ``channel_names``."""

    realtime_event_publisher.dispatch_many(channel_names, event=event, payload=payload)


__all__ = [
    "RealtimeEventPublisher",
    "dispatch_realtime_event",
    "realtime_event_publisher",
    "stamp_payload",
]
