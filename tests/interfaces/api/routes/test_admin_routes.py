"""Integration tests for the administrator endpoints."""

from __future__ import annotations

import csv
import io

import pytest

pytest.importorskip("fastapi")


def _signup(client, email: str, name: str = "Pending User") -> int:
    response = client.post(
        "/auth/signup",
        json={
            "name": name,
            "email": email,
            "password": "Secret123",
            "confirm_password": "Secret123",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_regular_users_cannot_reach_admin_routes(client, admin_user, user_factory):
    _, headers = user_factory("member@example.com")

    response = client.get("/admin/stats", headers=headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_stats_snapshot(client, admin_headers, user_factory):
    _, headers = user_factory("member@example.com", name="Member")
    first = client.post("/todos/", json={"title": "One"}, headers=headers).json()
    client.post("/todos/", json={"title": "Two"}, headers=headers)
    client.post("/todos/", json={"title": "Three"}, headers=headers)
    client.post(f"/todos/{first['id']}/toggle", headers=headers)
    _signup(client, "pending@example.com")

    body = client.get("/admin/stats", headers=admin_headers).json()

    assert body["total_users"] == 3
    assert body["pending_users"] == 1
    assert body["total_todos"] == 3
    assert body["completed_todos"] == 1
    assert body["completion_rate"] == 33
    assert [item["email"] for item in body["pending"]] == ["pending@example.com"]
    assert {item["title"] for item in body["recent_todos"]} == {"One", "Two", "Three"}
    assert body["recent_todos"][0]["user_name"] == "Member"


def test_pending_and_recent_lists(client, admin_headers, user_factory):
    _signup(client, "first@example.com")
    _signup(client, "second@example.com")
    _, headers = user_factory("member@example.com")
    for index in range(12):
        client.post("/todos/", json={"title": f"Task {index}"}, headers=headers)

    pending = client.get("/admin/pending-users", headers=admin_headers).json()
    recent = client.get("/admin/recent-todos", headers=admin_headers).json()

    assert {item["email"] for item in pending} == {"first@example.com", "second@example.com"}
    assert len(recent) == 10


def test_approve_user(client, admin_headers):
    user_id = _signup(client, "pending@example.com")

    response = client.post(
        "/admin/review-user", json={"user_id": user_id, "approved": True}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json() == {
        "user_id": user_id,
        "approved": True,
        "message": "User approved successfully",
    }
    assert client.get("/admin/pending-users", headers=admin_headers).json() == []

    again = client.post(
        "/admin/review-user", json={"user_id": user_id, "approved": True}, headers=admin_headers
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "User is already approved"


def test_reject_user_removes_account(client, admin_headers):
    user_id = _signup(client, "pending@example.com")

    response = client.post(
        "/admin/review-user", json={"user_id": user_id, "approved": False}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["message"] == "User rejected and removed"
    users = client.get("/admin/users", headers=admin_headers).json()
    assert [user["email"] for user in users] == ["admin@example.com"]

    missing = client.post(
        "/admin/review-user", json={"user_id": user_id, "approved": True}, headers=admin_headers
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "User not found"


def test_approved_member_cannot_be_rejected(client, admin_headers, user_factory):
    member, headers = user_factory("member@example.com", name="Member")
    client.post("/todos/", json={"title": "Keep me"}, headers=headers)

    response = client.post(
        "/admin/review-user", json={"user_id": member.id, "approved": False}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only pending users can be rejected"
    stats = client.get("/admin/stats", headers=admin_headers).json()
    assert (stats["total_users"], stats["total_todos"]) == (2, 1)


def test_admin_cannot_review_themselves(client, admin_user, admin_headers):
    response = client.post(
        "/admin/review-user",
        json={"user_id": admin_user.id, "approved": False},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot review your own account"


def test_export_all_todos(client, admin_headers, user_factory):
    _, headers = user_factory("member@example.com", name="Member")
    client.post("/todos/", json={"title": "Shared", "tags": ["x"]}, headers=headers)

    as_csv = client.get("/admin/export-todos", headers=admin_headers)
    assert as_csv.status_code == 200
    assert "todos_export_" in as_csv.headers["content-disposition"]
    (row,) = list(csv.DictReader(io.StringIO(as_csv.text)))
    assert row["Title"] == "Shared"
    assert row["Completed"] == "No"
    assert row["User Email"] == "member@example.com"
    assert row["User Name"] == "Member"

    as_json = client.get("/admin/export-todos?format=json", headers=admin_headers).json()
    assert as_json["totalTodos"] == 1
    assert as_json["todos"][0]["user"] == {"email": "member@example.com", "name": "Member"}
    assert "exportDate" in as_json
