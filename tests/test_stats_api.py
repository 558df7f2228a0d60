from __future__ import annotations

from datetime import timedelta
from typing import Dict

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.models import License, LicenseStatus, Subscription, User
from comet_admin.utils.helpers import utcnow


async def _seed(db: AsyncSession) -> None:
    now = utcnow()
    fresh = User(username="fresh", password_hash="x", created_at=now - timedelta(days=1), last_login=now)
    old = User(username="old", password_hash="x", created_at=now - timedelta(days=60))
    banned = User(username="banned", password_hash="x", is_banned=True, created_at=now - timedelta(days=2))
    db.add_all([fresh, old, banned])
    await db.flush()

    db.add_all([
        Subscription(user_id=fresh.id, subscription_name="premium", expiry_date=now + timedelta(days=3)),
        Subscription(user_id=old.id, subscription_name="basic", expiry_date=now + timedelta(days=40)),
        Subscription(user_id=old.id, subscription_name="basic", expiry_date=now - timedelta(days=1)),
        License(license_key="AAAA-AAAA-AAAA-AAAA", subscription_type="premium", duration_days=30,
                status=LicenseStatus.USED, used_by=fresh.id, used_at=now),
        License(license_key="BBBB-BBBB-BBBB-BBBB", subscription_type="premium", duration_days=30,
                status=LicenseStatus.USED, used_by=old.id, used_at=now),
        License(license_key="CCCC-CCCC-CCCC-CCCC", subscription_type="basic", duration_days=30,
                status=LicenseStatus.USED, used_by=old.id, used_at=now),
        License(license_key="DDDD-DDDD-DDDD-DDDD", subscription_type="basic", duration_days=30),
    ])
    await db.commit()


def test_stats_shape_and_counts(client: TestClient, auth_headers: Dict[str, str], run_db) -> None:
    run_db(_seed)

    response = client.get("/api/stats", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    stats = body["stats"]
    assert stats["users"] == {"total": 3, "new": 2, "banned": 1, "recentLogins": 1}
    assert stats["subscriptions"] == {"active": 2, "expired": 1, "expiringSoon": 1}
    assert stats["licenses"] == {"total": 4, "unused": 1, "used": 3}
    assert stats["subscriptionTypes"] == [
        {"subscription_type": "premium", "count": 2},
        {"subscription_type": "basic", "count": 1},
    ]
    assert sum(point["count"] for point in stats["userGrowth"]) == 2
    assert [(e["username"], e["subscription_name"]) for e in stats["expiringSoon"]] == [("fresh", "premium")]


def test_stats_on_empty_database(client: TestClient, auth_headers: Dict[str, str]) -> None:
    stats = client.get("/api/stats", headers=auth_headers).json()["stats"]

    assert stats["users"]["total"] == 0
    assert stats["licenses"] == {"total": 0, "unused": 0, "used": 0}
    assert stats["subscriptionTypes"] == []
    assert stats["expiringSoon"] == []


def test_stats_requires_admin(client: TestClient) -> None:
    assert client.get("/api/stats").status_code == 401


def test_expiring_soon_lists_every_subscription_in_window(
    client: TestClient, auth_headers: Dict[str, str], run_db
) -> None:
    async def seed(db: AsyncSession) -> None:
        now = utcnow()
        users = [User(username=f"player{i:02d}", password_hash="x") for i in range(12)]
        db.add_all(users)
        await db.flush()
        db.add_all([
            Subscription(user_id=user.id, subscription_name="premium",
                         expiry_date=now + timedelta(days=1 + i % 6, hours=i))
            for i, user in enumerate(users)
        ])
        await db.commit()

    run_db(seed)

    stats = client.get("/api/stats", headers=auth_headers).json()["stats"]

    assert stats["subscriptions"]["expiringSoon"] == 12
    assert len(stats["expiringSoon"]) == 12
    expiries = [entry["expiry_date"] for entry in stats["expiringSoon"]]
    assert expiries == sorted(expiries)
