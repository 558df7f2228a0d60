from typing import Optional
from fastapi import APIRouter, Query, Request
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.api.deps import DBSession, CurrentAdmin
from comet_admin.exceptions import Conflict, NotFound
from comet_admin.middleware.security import get_client_ip
from comet_admin.models import User, ActivityAction
from comet_admin.schemas.common import SuccessResponse
from comet_admin.schemas.user import (
    UserCreate, UserUpdate, UserBanRequest, UserItem, UserResponse, UserListResponse
)
from comet_admin.services.activity_service import ActivityService
from comet_admin.utils.security import get_password_hash


router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(
    db: DBSession,
    admin: CurrentAdmin,
    search: Optional[str] = Query(None),
    banned: Optional[bool] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0)
):
    """List users with optional search and ban filter."""
    query = select(User)

    if search:
        query = query.where(
            or_(
                User.username.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%")
            )
        )

    if banned is not None:
        query = query.where(User.is_banned == banned)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit)
    result = await db.execute(query)
    users = result.scalars().all()

    return UserListResponse(
        users=[UserItem.model_validate(u) for u in users],
        total=total,
        limit=limit,
        offset=offset
    )


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    request: UserCreate,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Create a new end user."""
    existing = await db.execute(select(User.id).where(User.username == request.username))
    if existing.scalar_one_or_none() is not None:
        raise Conflict("Username already exists")

    user = User(
        username=request.username,
        password_hash=get_password_hash(request.password),
        email=request.email,
        hwid=request.hwid
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Username already exists")

    await ActivityService(db).log(
        ActivityAction.USER_CREATED,
        details=f"User {user.username} created by {admin.username}",
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(user)

    return UserResponse(message="User created successfully", user=UserItem.model_validate(user))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: DBSession, admin: CurrentAdmin):
    """Get user details."""
    user = await _get_user(db, user_id)
    return UserResponse(user=UserItem.model_validate(user))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    request: UserUpdate,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Update user details."""
    user = await _get_user(db, user_id)

    update_data = request.model_dump(exclude_unset=True)
    password = update_data.pop("password", None)
    for field, value in update_data.items():
        setattr(user, field, value)
    if password:
        user.password_hash = get_password_hash(password)

    changed = sorted(update_data) + (["password"] if password else [])
    await ActivityService(db).log(
        ActivityAction.USER_UPDATED,
        details=f"Updated fields: {', '.join(changed) or 'none'}",
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(user)

    return UserResponse(message="User updated successfully", user=UserItem.model_validate(user))


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: int,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Delete a user together with their subscriptions."""
    user = await _get_user(db, user_id)
    username = user.username

    await db.delete(user)
    await ActivityService(db).log(
        ActivityAction.USER_DELETED,
        details=f"User {username} deleted by {admin.username}",
        username=username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    return SuccessResponse(message="User deleted successfully")


@router.post("/{user_id}/ban", response_model=UserResponse)
async def ban_user(
    user_id: int,
    request: UserBanRequest,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Ban or unban a user."""
    user = await _get_user(db, user_id)

    user.is_banned = request.is_banned
    user.ban_reason = request.reason if request.is_banned else None

    if request.is_banned:
        action = ActivityAction.USER_BANNED
        message = "User banned successfully"
        details = f"Banned: {request.reason or 'no reason given'}"
    else:
        action = ActivityAction.USER_UNBANNED
        message = "User unbanned successfully"
        details = "Ban lifted"

    await ActivityService(db).log(
        action,
        details=details,
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(user)

    return UserResponse(message=message, user=UserItem.model_validate(user))


@router.post("/{user_id}/reset-hwid", response_model=UserResponse)
async def reset_user_hwid(
    user_id: int,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Clear the hardware binding so the user can log in from a new machine."""
    user = await _get_user(db, user_id)
    user.hwid = None

    await ActivityService(db).log(
        ActivityAction.USER_HWID_RESET,
        details=f"HWID reset by {admin.username}",
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(user)

    return UserResponse(message="HWID reset successfully", user=UserItem.model_validate(user))


async def _get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise NotFound("User not found")

    return user
