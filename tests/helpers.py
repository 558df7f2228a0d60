"""Request helpers shared by the API tests."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.testclient import TestClient

ADMIN_PASSWORD = "correct-horse-battery"


def login(client: TestClient, username: str, password: str = ADMIN_PASSWORD, code: Optional[str] = None):
    body: Dict[str, Any] = {"username": username, "password": password}
    if code is not None:
        body["twoFactorCode"] = code
    return client.post("/api/auth/login", json=body)


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def create_user(client: TestClient, headers: Dict[str, str], username: str, **fields: Any) -> Dict[str, Any]:
    body = {"username": username, "password": "user-pass-123", **fields}
    response = client.post("/api/users", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["user"]
