from datetime import timedelta
from fastapi import APIRouter
from sqlalchemy import select, func

from comet_admin.api.deps import DBSession, CurrentAdmin
from comet_admin.models import User, License, LicenseStatus, Subscription
from comet_admin.schemas.stats import (
    UserStats, SubscriptionStats, LicenseStats, SubscriptionTypeCount,
    UserGrowthPoint, ExpiringSubscription, DashboardStats, StatsResponse
)
from comet_admin.utils.helpers import utcnow


router = APIRouter()


EXPIRING_WINDOW_DAYS = 7
NEW_USER_WINDOW_DAYS = 7
GROWTH_WINDOW_DAYS = 30


@router.get("", response_model=StatsResponse)
async def get_stats(
    db: DBSession,
    admin: CurrentAdmin
):
    """Get admin dashboard statistics."""
    now = utcnow()
    week_ago = now - timedelta(days=NEW_USER_WINDOW_DAYS)
    day_ago = now - timedelta(days=1)
    expiring_until = now + timedelta(days=EXPIRING_WINDOW_DAYS)

    async def count(*criteria, model=User) -> int:
        result = await db.execute(select(func.count(model.id)).where(*criteria))
        return result.scalar() or 0

    # Users
    users = UserStats(
        total=await count(),
        new=await count(User.created_at >= week_ago),
        banned=await count(User.is_banned == True),
        recent_logins=await count(User.last_login >= day_ago)
    )

    # Subscriptions
    subscriptions = SubscriptionStats(
        active=await count(
            Subscription.is_active == True, Subscription.expiry_date > now,
            model=Subscription
        ),
        expired=await count(Subscription.expiry_date <= now, model=Subscription),
        expiring_soon=await count(
            Subscription.is_active == True,
            Subscription.expiry_date > now,
            Subscription.expiry_date <= expiring_until,
            model=Subscription
        )
    )

    # Licenses
    licenses = LicenseStats(
        total=await count(model=License),
        unused=await count(License.status == LicenseStatus.UNUSED, model=License),
        used=await count(License.status == LicenseStatus.USED, model=License)
    )

    # Redeemed licenses by subscription type
    types_result = await db.execute(
        select(License.subscription_type, func.count(License.id).label("count"))
        .where(License.status == LicenseStatus.USED)
        .group_by(License.subscription_type)
        .order_by(func.count(License.id).desc(), License.subscription_type)
    )
    subscription_types = [
        SubscriptionTypeCount(subscription_type=sub_type, count=n)
        for sub_type, n in types_result.all()
    ]

    # Registrations per day
    day = func.date(User.created_at)
    growth_result = await db.execute(
        select(day.label("day"), func.count(User.id))
        .where(User.created_at >= now - timedelta(days=GROWTH_WINDOW_DAYS))
        .group_by(day)
        .order_by(day)
    )
    user_growth = [
        UserGrowthPoint(date=str(d), count=n)
        for d, n in growth_result.all()
    ]

    # Subscriptions about to run out
    expiring_result = await db.execute(
        select(User.username, Subscription.subscription_name, Subscription.expiry_date)
        .join(User, Subscription.user_id == User.id)
        .where(
            Subscription.is_active == True,
            Subscription.expiry_date > now,
            Subscription.expiry_date <= expiring_until
        )
        .order_by(Subscription.expiry_date.asc())
    )
    expiring_soon = [
        ExpiringSubscription(username=username, subscription_name=name, expiry_date=expiry)
        for username, name, expiry in expiring_result.all()
    ]

    return StatsResponse(
        stats=DashboardStats(
            users=users,
            subscriptions=subscriptions,
            licenses=licenses,
            subscription_types=subscription_types,
            user_growth=user_growth,
            expiring_soon=expiring_soon
        )
    )
