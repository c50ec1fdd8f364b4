"""Autorización de canales y websocket de suscripción a eventos en tiempo real."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, WebSocket, WebSocketDisconnect, status

from taskboard.domain.entities import User
from taskboard.infrastructure.realtime import (
    ChannelForbidden,
    authorize_channel,
    channel_hub,
    websocket_listener,
)
from taskboard.interfaces.api.dependencies import get_current_active_user
from taskboard.interfaces.api.schemas import ChannelAuthResponse

router = APIRouter(prefix="/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)


@router.post("/auth", response_model=ChannelAuthResponse)
def authorize_subscription(
    socket_id: str = Form(...),
    channel_name: str = Form(...),
    current_user: User = Depends(get_current_active_user),
):
    """Firma una concesión para que ``socket_id`` se suscriba a ``channel_name``."""

    try:
        grant = authorize_channel(current_user, socket_id=socket_id, channel_name=channel_name)
    except ChannelForbidden as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden") from exc
    return ChannelAuthResponse(auth=grant, channel_name=channel_name, socket_id=socket_id)


def _frame(event: str, data: dict | None = None, channel: str | None = None) -> dict:
    return {"channel": channel, "event": event, "data": data or {}}


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Websocket que reenvía los eventos de los canales a los que se suscribe el cliente."""

    socket_id = await channel_hub.connect(websocket)
    try:
        await websocket.send_json(_frame("connection_established", {"socketId": socket_id}))
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except Exception:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json(_frame("pong"))
                continue

            channel_name = message.get("channel")
            if not isinstance(channel_name, str) or not channel_name:
                continue

            if message_type == "subscribe":
                try:
                    channel_hub.subscribe(
                        channel_name,
                        socket_id=socket_id,
                        grant=str(message.get("auth") or ""),
                        listener=websocket_listener(websocket),
                    )
                except ChannelForbidden as exc:
                    await websocket.send_json(
                        _frame("subscription_error", {"reason": exc.reason}, channel_name)
                    )
                    continue
                await websocket.send_json(_frame("subscription_succeeded", channel=channel_name))
                continue

            if message_type == "unsubscribe":
                channel_hub.unsubscribe(channel_name, socket_id)
    except WebSocketDisconnect:
        logger.debug("Socket %s disconnected", socket_id)
    finally:
        channel_hub.disconnect(socket_id)
