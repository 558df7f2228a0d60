from __future__ import annotations

from datetime import timedelta
from typing import Dict

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.models import ActivityAction, ActivityLog
from comet_admin.utils.helpers import utcnow


async def _seed_old_entries(db: AsyncSession) -> None:
    old = utcnow() - timedelta(days=45)
    db.add_all([
        ActivityLog(action=ActivityAction.USER_CREATED, username="ghost", timestamp=old),
        ActivityLog(action=ActivityAction.USER_DELETED, username="ghost", timestamp=old),
    ])
    await db.commit()


async def _count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(ActivityLog.id)))).scalar()


def test_list_newest_first_with_paging(client: TestClient, auth_headers: Dict[str, str], run_db) -> None:
    run_db(_seed_old_entries)

    body = client.get("/api/activity", params={"limit": 2}, headers=auth_headers).json()

    assert body["total"] == 3
    assert (body["limit"], body["offset"]) == (2, 0)
    assert body["logs"][0]["action"] == "admin_login"
    assert len(body["logs"]) == 2


def test_filter_by_action_counts_filtered_total(client: TestClient, auth_headers: Dict[str, str], run_db) -> None:
    run_db(_seed_old_entries)

    body = client.get("/api/activity", params={"action": "user_deleted"}, headers=auth_headers).json()

    assert body["total"] == 1
    assert body["logs"][0]["username"] == "ghost"


def test_unknown_action_is_400(client: TestClient, auth_headers: Dict[str, str]) -> None:
    response = client.get("/api/activity", params={"action": "teleport"}, headers=auth_headers)

    assert response.status_code == 400


def test_cleanup_removes_only_old_entries(client: TestClient, auth_headers: Dict[str, str], run_db) -> None:
    run_db(_seed_old_entries)

    response = client.delete("/api/activity/cleanup", params={"days": 30}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Deleted 2 old log entries", "deleted": 2}
    # The login entry survives and the cleanup itself is recorded
    assert run_db(_count) == 2
    actions = [e["action"] for e in client.get("/api/activity", headers=auth_headers).json()["logs"]]
    assert actions == ["logs_cleaned", "admin_login"]
