"""End-to-end tests for the live session websocket."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from starlette.websockets import WebSocketDisconnect  # noqa: E402

from taskboard.domain.entities import ROLE_USER  # noqa: E402
from taskboard.infrastructure.database import SessionLocal  # noqa: E402
from taskboard.infrastructure.realtime import channel_hub  # noqa: E402
from taskboard.infrastructure.repositories import UserRepository  # noqa: E402
from taskboard.infrastructure.security import (  # noqa: E402
    create_access_token,
    password_signature,
)

MAX_FRAMES = 50

def _token(headers: dict[str, str]) -> str:
    return headers["Authorization"].split(" ", 1)[1]

def _receive_until(websocket, predicate):
    """Read frames until ``predicate`` accepts one and return it."""

    for _ in range(MAX_FRAMES):
        frame = websocket.receive_json()
        if predicate(frame):
            return frame
    raise AssertionError("Expected live frame never arrived")

def _ready(frame) -> bool:
    return frame["type"] == "state" and frame["data"]["status"] == "ready"

def _signup(client, email: str, name: str) -> int:
    response = client.post(
        "/auth/signup",
        json={
            "name": name,
            "email": email,
            "password": "Secret123",
            "confirm_password": "Secret123",
        },
    )
    return response.json()["id"]

def test_live_socket_requires_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/live/ws") as websocket:
            websocket.receive_json()

def test_live_socket_rejects_invalid_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/live/ws?token=invalid") as websocket:
            websocket.receive_json()

def test_admin_session_tracks_registrations_and_reviews(client, admin_headers):
    _signup(client, "early@example.com", "Early Bird")

    with client.websocket_connect(f"/live/ws?token={_token(admin_headers)}") as websocket:
        initial = _receive_until(websocket, _ready)["data"]
        assert initial["stats"]["totalUsers"] == 2
        assert initial["stats"]["pendingUsers"] == 1
        assert [item["email"] for item in initial["pendingUsers"]] == ["early@example.com"]

        user_id = _signup(client, "newcomer@example.com", "Newcomer")
        registered = _receive_until(
            websocket,
            lambda frame: frame["type"] == "state"
            and frame["data"]["stats"]["pendingUsers"] == 2,
        )["data"]
        assert registered["pendingUsers"][0]["email"] == "newcomer@example.com"
        inbox = registered["notifications"]
        assert inbox["unreadCount"] == 1
        assert inbox["items"][0]["title"] == "New User Registration"

        client.post(
            "/admin/review-user",
            json={"user_id": user_id, "approved": True},
            headers=admin_headers,
        )
        approved = _receive_until(
            websocket,
            lambda frame: frame["type"] == "state"
            and frame["data"]["stats"]["pendingUsers"] == 1,
        )["data"]
        assert [item["email"] for item in approved["pendingUsers"]] == ["early@example.com"]

        websocket.send_json({"type": "ack", "all": True})
        acknowledged = _receive_until(
            websocket,
            lambda frame: frame["type"] == "state"
            and frame["data"]["notifications"]["unreadCount"] == 0,
        )["data"]
        assert len(acknowledged["notifications"]["items"]) == 1

def test_user_session_receives_toast_and_inbox_updates(client, admin_headers, login_as):
    user_id = _signup(client, "member@example.com", "Member")
    client.post(
        "/admin/review-user", json={"user_id": user_id, "approved": True}, headers=admin_headers
    )
    headers = login_as("member@example.com")
    channel = f"private-user-{user_id}"
    notification = {
        "eventId": "welcome-1",
        "type": "success",
        "title": "Heads up",
        "message": "Your report is due tomorrow.",
    }

    with client.websocket_connect(f"/live/ws?token={_token(headers)}") as websocket:
        initial = _receive_until(websocket, _ready)["data"]
        assert "stats" not in initial
        assert initial["notifications"] == {"unreadCount": 0, "items": []}

        client.portal.call(channel_hub.trigger, channel, "notification", notification)
        toast = _receive_until(websocket, lambda frame: frame["type"] == "toast")["data"]
        assert toast["type"] == "success"
        assert toast["duration"] == 4.0
        inbox = _receive_until(websocket, lambda frame: frame["type"] == "state")["data"]
        (item,) = inbox["notifications"]["items"]
        assert item["id"] == "notification:welcome-1"
        assert inbox["notifications"]["unreadCount"] == 1

        client.portal.call(channel_hub.trigger, channel, "notification", notification)
        client.portal.call(
            channel_hub.trigger, channel, "todo-created", {"todoId": 1, "userId": user_id}
        )
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong", "data": {}}

        websocket.send_json({"type": "ack", "ids": [item["id"]]})
        read = websocket.receive_json()["data"]["notifications"]
        assert read["unreadCount"] == 0

        websocket.send_json({"type": "remove", "id": item["id"]})
        removed = websocket.receive_json()["data"]["notifications"]
        assert removed["items"] == []

def test_pending_account_cannot_open_live_socket(client, admin_user):
    _signup(client, "pending@example.com", "Pending")

    with SessionLocal() as session:
        user = UserRepository(session).get_by_email("pending@example.com")
    token = create_access_token(
        {
            "sub": user.email,
            "uid": user.id,
            "role": ROLE_USER,
            "pwd_sig": password_signature(user.password, user.approved),
        }
    )

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/live/ws?token={token}") as websocket:
            websocket.receive_json()
