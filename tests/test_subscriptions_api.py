from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict

from fastapi.testclient import TestClient

from tests.helpers import create_user


def _create(client: TestClient, headers: Dict[str, str], user_id: int, **fields):
    body = {"userId": user_id, "subscriptionName": "premium", **fields}
    return client.post("/api/subscriptions", json=body, headers=headers)


def test_create_with_duration(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")

    response = _create(client, auth_headers, user["id"], durationDays=30)

    assert response.status_code == 201
    sub = response.json()["subscription"]
    assert sub["username"] == "player1"
    assert sub["status"] == "active"
    assert sub["days_left"] in (29, 30)


def test_create_with_explicit_expiry(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    expiry = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()

    sub = _create(client, auth_headers, user["id"], expiryDate=expiry).json()["subscription"]

    assert sub["status"] == "expiring"


def test_create_needs_duration_or_expiry(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")

    response = _create(client, auth_headers, user["id"])

    assert response.status_code == 400


def test_create_for_missing_user_is_404(client: TestClient, auth_headers: Dict[str, str]) -> None:
    response = _create(client, auth_headers, 404, durationDays=10)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_extend_adds_days(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    sub = _create(client, auth_headers, user["id"], durationDays=10).json()["subscription"]

    response = client.post(f"/api/subscriptions/{sub['id']}/extend", json={"days": 20}, headers=auth_headers)

    assert response.status_code == 200
    extended = response.json()["subscription"]
    old_expiry = datetime.fromisoformat(sub["expiry_date"])
    new_expiry = datetime.fromisoformat(extended["expiry_date"])
    assert new_expiry - old_expiry == timedelta(days=20)


def test_extend_expired_counts_from_now(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    past = (datetime.now(timezone.utc) - timedelta(days=5)).isoformat()
    sub = _create(client, auth_headers, user["id"], expiryDate=past).json()["subscription"]
    assert sub["status"] == "expired"

    extended = client.post(
        f"/api/subscriptions/{sub['id']}/extend", json={"days": 10}, headers=auth_headers
    ).json()["subscription"]

    assert extended["status"] == "active"
    assert extended["days_left"] in (9, 10)


def test_update_and_filter_active(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    first = _create(client, auth_headers, user["id"], durationDays=30).json()["subscription"]
    _create(client, auth_headers, user["id"], durationDays=60)

    response = client.put(f"/api/subscriptions/{first['id']}", json={"isActive": False}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["subscription"]["status"] == "inactive"

    active = client.get("/api/subscriptions", params={"active": "true"}, headers=auth_headers).json()
    inactive = client.get("/api/subscriptions", params={"active": "false"}, headers=auth_headers).json()
    assert active["total"] == 1
    assert inactive["total"] == 1
    assert inactive["subscriptions"][0]["id"] == first["id"]


def test_delete_subscription(client: TestClient, auth_headers: Dict[str, str]) -> None:
    user = create_user(client, auth_headers, "player1")
    sub = _create(client, auth_headers, user["id"], durationDays=30).json()["subscription"]

    assert client.delete(f"/api/subscriptions/{sub['id']}", headers=auth_headers).status_code == 200
    response = client.get(f"/api/subscriptions/{sub['id']}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Subscription not found"
