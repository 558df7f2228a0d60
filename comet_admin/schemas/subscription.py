from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

from comet_admin.schemas.common import CamelModel


class SubscriptionCreate(CamelModel):
    user_id: int
    subscription_name: str = Field(..., min_length=1, max_length=100)
    duration_days: Optional[int] = Field(None, ge=1, le=3650)
    expiry_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_expiry(self):
        if self.duration_days is None and self.expiry_date is None:
            raise ValueError("Either durationDays or expiryDate is required")
        return self


class SubscriptionUpdate(CamelModel):
    subscription_name: Optional[str] = Field(None, min_length=1, max_length=100)
    expiry_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class SubscriptionExtendRequest(CamelModel):
    days: int = Field(..., ge=1, le=3650)


class SubscriptionItem(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    subscription_name: str
    start_date: datetime
    expiry_date: datetime
    is_active: bool
    license_id: Optional[int]
    status: str  # active / expiring / expired / inactive
    days_left: Optional[int]
    created_at: datetime


class SubscriptionResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    subscription: SubscriptionItem


class SubscriptionListResponse(CamelModel):
    success: bool = True
    subscriptions: List[SubscriptionItem]
    total: int
