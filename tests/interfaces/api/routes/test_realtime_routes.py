"""Tests for channel authorization and the realtime websocket."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")


def _connect(websocket) -> str:
    frame = websocket.receive_json()
    assert frame["event"] == "connection_established"
    return frame["data"]["socketId"]


def _grant(client, headers, socket_id: str, channel_name: str):
    return client.post(
        "/realtime/auth",
        data={"socket_id": socket_id, "channel_name": channel_name},
        headers=headers,
    )


def test_channel_auth_only_for_own_channel(client, user_factory):
    user, headers = user_factory("member@example.com")

    own = _grant(client, headers, "socket-1", f"private-user-{user.id}")
    other = _grant(client, headers, "socket-1", f"private-user-{user.id + 100}")
    admin = _grant(client, headers, "socket-1", "private-admin")

    assert own.status_code == 200
    assert own.json()["channel_name"] == f"private-user-{user.id}"
    assert own.json()["auth"]
    assert other.status_code == 403
    assert admin.status_code == 403


def test_admin_may_authorize_admin_channel(client, admin_headers):
    response = _grant(client, admin_headers, "socket-1", "private-admin")

    assert response.status_code == 200


def test_channel_auth_requires_token(client):
    response = client.post(
        "/realtime/auth", data={"socket_id": "s", "channel_name": "private-user-1"}
    )

    assert response.status_code == 401


def test_websocket_subscription_receives_events(client, user_factory):
    user, headers = user_factory("member@example.com", name="Member")
    channel = f"private-user-{user.id}"

    with client.websocket_connect("/realtime/ws") as websocket:
        socket_id = _connect(websocket)
        grant = _grant(client, headers, socket_id, channel).json()["auth"]

        websocket.send_json({"type": "subscribe", "channel": channel, "auth": grant})
        assert websocket.receive_json() == {
            "channel": channel,
            "event": "subscription_succeeded",
            "data": {},
        }

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json()["event"] == "pong"


def test_websocket_rejects_grant_for_another_socket(client, user_factory):
    user, headers = user_factory("member@example.com")
    channel = f"private-user-{user.id}"
    grant = _grant(client, headers, "somebody-else", channel).json()["auth"]

    with client.websocket_connect("/realtime/ws") as websocket:
        _connect(websocket)
        websocket.send_json({"type": "subscribe", "channel": channel, "auth": grant})
        frame = websocket.receive_json()

    assert frame["event"] == "subscription_error"
    assert frame["channel"] == channel
    assert frame["data"]["reason"] == "Channel grant does not match this subscription"


def test_admin_socket_receives_registration_events(client, admin_user, admin_headers):
    with client.websocket_connect("/realtime/ws") as websocket:
        socket_id = _connect(websocket)
        grant = _grant(client, admin_headers, socket_id, "private-admin").json()["auth"]
        websocket.send_json({"type": "subscribe", "channel": "private-admin", "auth": grant})
        assert websocket.receive_json()["event"] == "subscription_succeeded"

        client.post(
            "/auth/signup",
            json={
                "name": "Newcomer",
                "email": "newcomer@example.com",
                "password": "Secret123",
                "confirm_password": "Secret123",
            },
        )
        frame = websocket.receive_json()

    assert frame["channel"] == "private-admin"
    assert frame["event"] == "admin-notification"
    assert frame["data"]["title"] == "New User Registration"
    assert frame["data"]["action"] == {"label": "Review User", "url": "/admin"}
    assert frame["data"]["eventId"]
