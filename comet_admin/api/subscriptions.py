from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import APIRouter, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from comet_admin.api.deps import DBSession, CurrentAdmin
from comet_admin.exceptions import NotFound
from comet_admin.middleware.security import get_client_ip
from comet_admin.models import Subscription, User, ActivityAction
from comet_admin.schemas.common import SuccessResponse
from comet_admin.schemas.subscription import (
    SubscriptionCreate, SubscriptionUpdate, SubscriptionExtendRequest,
    SubscriptionItem, SubscriptionResponse, SubscriptionListResponse
)
from comet_admin.services.activity_service import ActivityService
from comet_admin.utils.helpers import get_subscription_status, utcnow


router = APIRouter()


@router.get("", response_model=SubscriptionListResponse)
async def list_subscriptions(
    db: DBSession,
    admin: CurrentAdmin,
    user_id: Optional[int] = Query(None, alias="userId"),
    active: Optional[bool] = Query(None)
):
    """List subscriptions, soonest expiry first."""
    query = select(Subscription).options(selectinload(Subscription.user))

    if user_id is not None:
        query = query.where(Subscription.user_id == user_id)

    now = utcnow()
    if active is True:
        query = query.where(Subscription.is_active == True, Subscription.expiry_date > now)
    elif active is False:
        query = query.where((Subscription.is_active == False) | (Subscription.expiry_date <= now))

    result = await db.execute(query.order_by(Subscription.expiry_date.asc(), Subscription.id))
    subscriptions = result.scalars().all()

    return SubscriptionListResponse(
        subscriptions=[_to_item(s) for s in subscriptions],
        total=len(subscriptions)
    )


@router.post("", response_model=SubscriptionResponse, status_code=201)
async def create_subscription(
    request: SubscriptionCreate,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Create a subscription for a user."""
    result = await db.execute(select(User).where(User.id == request.user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise NotFound("User not found")

    now = utcnow()
    expiry_date = request.expiry_date
    if expiry_date is None:
        expiry_date = now + timedelta(days=request.duration_days)

    subscription = Subscription(
        user_id=user.id,
        subscription_name=request.subscription_name,
        start_date=now,
        expiry_date=_naive_utc(expiry_date),
        is_active=True
    )
    db.add(subscription)

    await ActivityService(db).log(
        ActivityAction.SUBSCRIPTION_CREATED,
        details=f"{request.subscription_name} until {subscription.expiry_date:%Y-%m-%d}",
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    subscription = await _get_subscription(db, subscription.id)
    return SubscriptionResponse(message="Subscription created successfully", subscription=_to_item(subscription))


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(subscription_id: int, db: DBSession, admin: CurrentAdmin):
    """Get subscription details."""
    subscription = await _get_subscription(db, subscription_id)
    return SubscriptionResponse(subscription=_to_item(subscription))


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    subscription_id: int,
    request: SubscriptionUpdate,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Update a subscription."""
    subscription = await _get_subscription(db, subscription_id)

    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("expiry_date") is not None:
        update_data["expiry_date"] = _naive_utc(update_data["expiry_date"])
    for field, value in update_data.items():
        if value is not None:
            setattr(subscription, field, value)

    await ActivityService(db).log(
        ActivityAction.SUBSCRIPTION_UPDATED,
        details=f"Updated fields: {', '.join(sorted(update_data)) or 'none'}",
        user_id=subscription.user_id,
        username=subscription.user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    subscription = await _get_subscription(db, subscription_id)
    return SubscriptionResponse(message="Subscription updated successfully", subscription=_to_item(subscription))


@router.post("/{subscription_id}/extend", response_model=SubscriptionResponse)
async def extend_subscription(
    subscription_id: int,
    request: SubscriptionExtendRequest,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """
    Extend a subscription by a number of days. An already expired
    subscription is extended from now rather than from its old expiry.
    """
    subscription = await _get_subscription(db, subscription_id)

    base = max(subscription.expiry_date, utcnow())
    subscription.expiry_date = base + timedelta(days=request.days)
    subscription.is_active = True

    await ActivityService(db).log(
        ActivityAction.SUBSCRIPTION_EXTENDED,
        details=f"Extended by {request.days} days until {subscription.expiry_date:%Y-%m-%d}",
        user_id=subscription.user_id,
        username=subscription.user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    subscription = await _get_subscription(db, subscription_id)
    return SubscriptionResponse(message="Subscription extended successfully", subscription=_to_item(subscription))


@router.delete("/{subscription_id}", response_model=SuccessResponse)
async def delete_subscription(
    subscription_id: int,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Delete a subscription."""
    subscription = await _get_subscription(db, subscription_id)
    user_id = subscription.user_id
    username = subscription.user.username
    name = subscription.subscription_name

    await db.delete(subscription)
    await ActivityService(db).log(
        ActivityAction.SUBSCRIPTION_DELETED,
        details=f"{name} deleted by {admin.username}",
        user_id=user_id,
        username=username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    return SuccessResponse(message="Subscription deleted successfully")


async def _get_subscription(db: AsyncSession, subscription_id: int) -> Subscription:
    result = await db.execute(
        select(Subscription)
        .options(selectinload(Subscription.user))
        .where(Subscription.id == subscription_id)
        .execution_options(populate_existing=True)
    )
    subscription = result.scalar_one_or_none()

    if subscription is None:
        raise NotFound("Subscription not found")

    return subscription


def _naive_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _to_item(subscription: Subscription) -> SubscriptionItem:
    """Convert Subscription model to SubscriptionItem."""
    sub_status, days_left = get_subscription_status(subscription.expiry_date, subscription.is_active)

    return SubscriptionItem(
        id=subscription.id,
        user_id=subscription.user_id,
        username=subscription.user.username if subscription.user else None,
        subscription_name=subscription.subscription_name,
        start_date=subscription.start_date,
        expiry_date=subscription.expiry_date,
        is_active=subscription.is_active,
        license_id=subscription.license_id,
        status=sub_status,
        days_left=days_left,
        created_at=subscription.created_at
    )
