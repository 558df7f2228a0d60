from __future__ import annotations

from typing import Dict

from fastapi.testclient import TestClient

from tests.helpers import create_user


def test_create_and_fetch_user(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1", email="p1@example.com", hwid="HW-1")

    assert user["username"] == "player1"
    assert user["status"] == "active"
    assert "password_hash" not in user

    response = client.get(f"/api/users/{user['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "p1@example.com"


def test_duplicate_username_is_409(client: TestClient, auth_headers: Dict[str, str]) -> None:
    create_user(client, auth_headers, "player1")

    response = client.post(
        "/api/users", json={"username": "player1", "password": "other-pass"}, headers=auth_headers
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Username already exists"


def test_invalid_email_is_400(client: TestClient, auth_headers: Dict[str, str]) -> None:
    response = client.post(
        "/api/users",
        json={"username": "player1", "password": "secret-1", "email": "not-an-email"},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_list_search_and_ban_filter(client: TestClient, auth_headers: Dict[str, str]) -> None:
    first = create_user(client, auth_headers, "alpha")
    create_user(client, auth_headers, "beta")
    client.post(f"/api/users/{first['id']}/ban", json={"isBanned": True, "reason": "cheating"}, headers=auth_headers)

    everyone = client.get("/api/users", headers=auth_headers).json()
    assert everyone["total"] == 2

    searched = client.get("/api/users", params={"search": "alp"}, headers=auth_headers).json()
    assert [u["username"] for u in searched["users"]] == ["alpha"]

    banned = client.get("/api/users", params={"banned": "true"}, headers=auth_headers).json()
    assert [u["username"] for u in banned["users"]] == ["alpha"]

    paged = client.get("/api/users", params={"limit": 1, "offset": 1}, headers=auth_headers).json()
    assert paged["total"] == 2
    assert len(paged["users"]) == 1
    assert (paged["limit"], paged["offset"]) == (1, 1)


def test_update_user(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")

    response = client.put(
        f"/api/users/{user['id']}", json={"email": "new@example.com", "hwid": "HW-9"}, headers=auth_headers
    )

    assert response.status_code == 200
    updated = response.json()["user"]
    assert updated["email"] == "new@example.com"
    assert updated["hwid"] == "HW-9"


def test_ban_and_unban(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")

    banned = client.post(
        f"/api/users/{user['id']}/ban", json={"isBanned": True, "reason": "chargeback"}, headers=auth_headers
    ).json()
    assert banned["message"] == "User banned successfully"
    assert banned["user"]["status"] == "banned"
    assert banned["user"]["ban_reason"] == "chargeback"

    unbanned = client.post(
        f"/api/users/{user['id']}/ban", json={"isBanned": False}, headers=auth_headers
    ).json()
    assert unbanned["user"]["status"] == "active"
    assert unbanned["user"]["ban_reason"] is None


def test_reset_hwid(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1", hwid="HW-1")

    response = client.post(f"/api/users/{user['id']}/reset-hwid", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["user"]["hwid"] is None


def test_delete_user_removes_subscriptions(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    client.post(
        "/api/subscriptions",
        json={"userId": user["id"], "subscriptionName": "premium", "durationDays": 30},
        headers=auth_headers,
    )

    response = client.delete(f"/api/users/{user['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get(f"/api/users/{user['id']}", headers=auth_headers).status_code == 404
    assert client.get("/api/subscriptions", headers=auth_headers).json()["total"] == 0


def test_missing_user_is_404(client: TestClient, auth_headers: Dict[str, str]) -> None:
    response = client.get("/api/users/999", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found"}


def test_mutations_are_logged(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    client.post(f"/api/users/{user['id']}/reset-hwid", headers=auth_headers)

    actions = [entry["action"] for entry in client.get("/api/activity", headers=auth_headers).json()["logs"]]

    assert actions[:2] == ["user_hwid_reset", "user_created"]


def test_blank_optional_fields_from_dashboard_form(client: TestClient, auth_headers: Dict[str, str]) -> None:
    response = client.post(
        "/api/users",
        json={"username": "player1", "password": "user-pass-123", "email": "", "hwid": ""},
        headers=auth_headers,
    )

    assert response.status_code == 201, response.text
    user = response.json()["user"]
    assert user["email"] is None
    assert user["hwid"] is None


def test_update_with_blank_fields_clears_them(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1", email="p1@example.com", hwid="HW-1")

    response = client.put(
        f"/api/users/{user['id']}",
        json={"email": "", "hwid": "", "password": ""},
        headers=auth_headers,
    )

    assert response.status_code == 200, response.text
    updated = response.json()["user"]
    assert updated["email"] is None
    assert updated["hwid"] is None
