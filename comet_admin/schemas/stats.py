from pydantic import BaseModel
from typing import List
from datetime import datetime

from comet_admin.schemas.common import CamelModel


class UserStats(CamelModel):
    total: int
    new: int
    banned: int
    recent_logins: int


class SubscriptionStats(CamelModel):
    active: int
    expired: int
    expiring_soon: int


class LicenseStats(CamelModel):
    total: int
    unused: int
    used: int


class SubscriptionTypeCount(BaseModel):
    subscription_type: str
    count: int


class UserGrowthPoint(BaseModel):
    date: str
    count: int


class ExpiringSubscription(BaseModel):
    username: str
    subscription_name: str
    expiry_date: datetime


class DashboardStats(CamelModel):
    users: UserStats
    subscriptions: SubscriptionStats
    licenses: LicenseStats
    subscription_types: List[SubscriptionTypeCount]
    user_growth: List[UserGrowthPoint]
    expiring_soon: List[ExpiringSubscription]


class StatsResponse(CamelModel):
    success: bool = True
    stats: DashboardStats
