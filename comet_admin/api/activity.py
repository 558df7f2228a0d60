from typing import Optional
from fastapi import APIRouter, Query, Request

from comet_admin.api.deps import DBSession, CurrentAdmin
from comet_admin.middleware.security import get_client_ip
from comet_admin.models import ActivityAction
from comet_admin.schemas.activity import ActivityLogItem, ActivityListResponse, ActivityCleanupResponse
from comet_admin.services.activity_service import ActivityService


router = APIRouter()


@router.get("", response_model=ActivityListResponse)
async def list_activity(
    db: DBSession,
    admin: CurrentAdmin,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    action: Optional[ActivityAction] = Query(None)
):
    """Activity log, newest first."""
    logs, total = await ActivityService(db).list_logs(limit=limit, offset=offset, action=action)

    return ActivityListResponse(
        logs=[ActivityLogItem.model_validate(entry) for entry in logs],
        total=total,
        limit=limit,
        offset=offset
    )


@router.delete("/cleanup", response_model=ActivityCleanupResponse)
async def cleanup_activity(
    req: Request,
    db: DBSession,
    admin: CurrentAdmin,
    days: int = Query(ActivityService.DEFAULT_RETENTION_DAYS, ge=1, le=3650)
):
    """Delete log entries older than ``days``."""
    service = ActivityService(db)
    deleted = await service.cleanup(days)

    await service.log(
        ActivityAction.LOGS_CLEANED,
        details=f"Deleted {deleted} entries older than {days} days",
        user_id=None,
        username=admin.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    return ActivityCleanupResponse(
        message=f"Deleted {deleted} old log entries",
        deleted=deleted
    )
