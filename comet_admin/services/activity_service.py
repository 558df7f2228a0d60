"""
Activity log service: append-only audit trail of admin actions
"""
from datetime import timedelta
from typing import Optional, Sequence
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.models import ActivityLog, ActivityAction
from comet_admin.utils.helpers import utcnow


class ActivityService:
    """Writes and queries activity log entries"""

    DEFAULT_RETENTION_DAYS = 30

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: ActivityAction,
        details: Optional[str] = None,
        user_id: Optional[int] = None,
        username: Optional[str] = None,
        ip_address: Optional[str] = None
    ) -> ActivityLog:
        """
        Add a log entry to the current transaction.
        The caller commits together with the change being logged.
        """
        entry = ActivityLog(
            action=action,
            details=details,
            user_id=user_id,
            username=username,
            ip_address=ip_address
        )
        self.db.add(entry)
        return entry

    async def list_logs(
        self,
        limit: int = 100,
        offset: int = 0,
        action: Optional[ActivityAction] = None
    ) -> tuple[Sequence[ActivityLog], int]:
        """Newest entries first, with the total count for the same filter."""
        query = select(ActivityLog)
        count_query = select(func.count(ActivityLog.id))
        if action is not None:
            query = query.where(ActivityLog.action == action)
            count_query = count_query.where(ActivityLog.action == action)

        query = query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        result = await self.db.execute(query.offset(offset).limit(limit))
        logs = result.scalars().all()

        total = (await self.db.execute(count_query)).scalar() or 0
        return logs, total

    async def cleanup(self, days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete entries older than ``days``. Returns the number removed."""
        cutoff = utcnow() - timedelta(days=days)
        result = await self.db.execute(
            delete(ActivityLog).where(ActivityLog.timestamp < cutoff)
        )
        return result.rowcount or 0
