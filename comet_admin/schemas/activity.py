from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from comet_admin.models.enums import ActivityAction
from comet_admin.schemas.common import CamelModel


class ActivityLogItem(BaseModel):
    id: int
    user_id: Optional[int]
    username: Optional[str]
    action: ActivityAction
    details: Optional[str]
    ip_address: Optional[str]
    timestamp: datetime

    model_config = {"from_attributes": True}


class ActivityListResponse(CamelModel):
    success: bool = True
    logs: List[ActivityLogItem]
    total: int
    limit: int
    offset: int


class ActivityCleanupResponse(CamelModel):
    success: bool = True
    message: str
    deleted: int
