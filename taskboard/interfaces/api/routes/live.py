"""Websocket que hospeda una sesión en vivo por conexión."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

import anyio
from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from taskboard.application.live import (
    CHANGE_STATE,
    HubTransport,
    LiveSession,
    LiveSnapshot,
    SessionStatus,
    Toast,
    Viewer,
)
from taskboard.application.use_cases import get_admin_snapshot
from taskboard.config import get_settings
from taskboard.domain.entities import StatsProjection, User
from taskboard.infrastructure.database import SessionLocal
from taskboard.infrastructure.realtime import channel_hub
from taskboard.interfaces.api.dependencies import resolve_current_user

router = APIRouter(prefix="/live", tags=["live"])
logger = logging.getLogger(__name__)


def _read_admin_snapshot() -> LiveSnapshot:
    db = SessionLocal()
    try:
        snapshot = get_admin_snapshot(db)
    finally:
        db.close()
    return LiveSnapshot(
        stats=snapshot.stats,
        pending=tuple(snapshot.pending),
        recent=tuple(snapshot.recent_todos),
    )


def _snapshot_loader(user: User):
    async def _load() -> LiveSnapshot:
        if not user.is_admin():
            return LiveSnapshot(stats=StatsProjection())
        return await anyio.to_thread.run_sync(_read_admin_snapshot)

    return _load


def _authenticate(token: str) -> User:
    db = SessionLocal()
    try:
        user = resolve_current_user(token, db)
    finally:
        db.close()
    if not user.approved:
        raise HTTPException(status_code=403, detail="Account pending approval")
    return user


async def _pump(websocket: WebSocket, outbox: "asyncio.Queue[dict[str, Any]]") -> None:
    while True:
        frame = await outbox.get()
        try:
            await websocket.send_json(frame)
        except (WebSocketDisconnect, RuntimeError):
            logger.debug("Live socket closed, dropping pending frames")
            return


def _handle_command(live: LiveSession, message: dict[str, Any]) -> bool:
    """Apply a client command and return ``True`` when it was recognised."""

    message_type = message.get("type")
    if message_type == "ack":
        if message.get("all"):
            live.mark_all_read()
            return True
        ids = message.get("ids")
        if isinstance(ids, list):
            for record_id in ids:
                live.mark_read(str(record_id))
        return True
    if message_type == "remove":
        live.clear_notification(str(message.get("id", "")))
        return True
    if message_type == "clear":
        live.clear_all()
        return True
    if message_type == "dismiss":
        live.dismiss_toast(str(message.get("id", "")))
        return True
    return False


@router.websocket("/ws")
async def live_websocket(websocket: WebSocket) -> None:
    """Transmite el estado de notificaciones y estadísticas del usuario autenticado."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        user = await anyio.to_thread.run_sync(_authenticate, token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    settings = get_settings()
    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def _render_toast(toast: Toast) -> None:
        outbox.put_nowait({"type": "toast", "data": toast.as_payload()})

    live = LiveSession(
        Viewer.from_user(user),
        transport=HubTransport(channel_hub, user),
        load_snapshot=_snapshot_loader(user),
        admin_channel=settings.admin_channel,
        toast_renderer=_render_toast,
        ledger_size=settings.dedupe_ledger_size,
        bucket_seconds=settings.dedupe_bucket_seconds,
    )

    def _observe(change: str) -> None:
        if change == CHANGE_STATE:
            outbox.put_nowait({"type": "state", "data": live.as_payload()})
        else:
            outbox.put_nowait({"type": "status", "data": live.status_payload()})

    live.add_observer(_observe)
    sender = asyncio.create_task(_pump(websocket, outbox))

    async def _mount() -> None:
        await live.mount()
        if live.status is SessionStatus.ERROR:
            outbox.put_nowait({"type": "error", "data": {"message": live.error}})
        else:
            outbox.put_nowait({"type": "state", "data": live.as_payload()})

    try:
        await _mount()
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except Exception:
                continue

            if not isinstance(message, dict):
                continue

            if message.get("type") == "ping":
                outbox.put_nowait({"type": "pong", "data": {}})
                continue
            if message.get("type") == "retry":
                if live.status is SessionStatus.ERROR:
                    await _mount()
                continue
            if not _handle_command(live, message):
                logger.debug("Ignoring unknown live command %s", message.get("type"))
    except WebSocketDisconnect:
        logger.debug("Live session for user %s disconnected", user.id)
    finally:
        live.teardown()
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sender
