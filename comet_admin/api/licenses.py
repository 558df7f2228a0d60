from datetime import timedelta
from typing import Optional
import csv
import io

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.api.deps import DBSession, CurrentAdmin
from comet_admin.exceptions import BadRequest, NotFound
from comet_admin.middleware.security import get_client_ip
from comet_admin.models import License, LicenseStatus, Subscription, User, ActivityAction
from comet_admin.schemas.common import SuccessResponse
from comet_admin.schemas.license import (
    LicenseGenerateRequest, LicenseActivateRequest, LicenseItem, LicenseResponse, LicenseListResponse
)
from comet_admin.services.activity_service import ActivityService
from comet_admin.utils.helpers import generate_license_key, utcnow


router = APIRouter()


CSV_COLUMNS = [
    "id", "license_key", "subscription_type", "duration_days",
    "status", "used_by", "used_at", "created_at"
]


@router.get("", response_model=LicenseListResponse)
async def list_licenses(
    db: DBSession,
    admin: CurrentAdmin,
    status_filter: Optional[LicenseStatus] = Query(None, alias="status"),
    subscription_type: Optional[str] = Query(None, alias="subscriptionType")
):
    """List license keys, newest first."""
    query = _filtered_query(status_filter, subscription_type)
    result = await db.execute(query.order_by(License.created_at.desc(), License.id.desc()))
    licenses = result.scalars().all()

    return LicenseListResponse(
        licenses=[LicenseItem.model_validate(lic) for lic in licenses],
        total=len(licenses)
    )


@router.post("/generate", response_model=LicenseListResponse, status_code=201)
async def generate_licenses(
    request: LicenseGenerateRequest,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Generate a batch of unused license keys."""
    keys: set[str] = set()
    while len(keys) < request.count:
        candidates = {generate_license_key() for _ in range(request.count - len(keys))}
        taken = await db.execute(
            select(License.license_key).where(License.license_key.in_(candidates))
        )
        keys |= candidates - set(taken.scalars().all())

    licenses = [
        License(
            license_key=key,
            subscription_type=request.subscription_type,
            duration_days=request.duration_days,
            status=LicenseStatus.UNUSED
        )
        for key in sorted(keys)
    ]
    db.add_all(licenses)

    await ActivityService(db).log(
        ActivityAction.LICENSES_GENERATED,
        details=(
            f"Generated {request.count} {request.subscription_type} license(s) "
            f"for {request.duration_days} days"
        ),
        username=admin.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()

    return LicenseListResponse(
        message=f"Generated {len(licenses)} license(s)",
        licenses=[LicenseItem.model_validate(lic) for lic in licenses],
        total=len(licenses)
    )


@router.get("/export/csv")
async def export_licenses_csv(
    db: DBSession,
    admin: CurrentAdmin,
    status_filter: Optional[LicenseStatus] = Query(None, alias="status")
):
    """Download license keys as CSV."""
    query = _filtered_query(status_filter, None)
    result = await db.execute(query.order_by(License.id))
    licenses = result.scalars().all()

    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_COLUMNS)
    for lic in licenses:
        writer.writerow([
            lic.id,
            lic.license_key,
            lic.subscription_type,
            lic.duration_days,
            lic.status.value,
            lic.used_by if lic.used_by is not None else "",
            lic.used_at.isoformat() if lic.used_at else "",
            lic.created_at.isoformat()
        ])

    filename = f"licenses-{utcnow().strftime('%Y%m%d')}.csv"
    return Response(
        content=buf.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/{license_id}", response_model=LicenseResponse)
async def get_license(license_id: int, db: DBSession, admin: CurrentAdmin):
    """Get license details."""
    lic = await _get_license(db, license_id)
    return LicenseResponse(license=LicenseItem.model_validate(lic))


@router.post("/{license_id}/activate", response_model=LicenseResponse)
async def activate_license(
    license_id: int,
    request: LicenseActivateRequest,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Redeem an unused license for a user and start their subscription."""
    lic = await _get_license(db, license_id)
    if lic.status != LicenseStatus.UNUSED:
        raise BadRequest(f"License is already {lic.status.value}")

    result = await db.execute(select(User).where(User.id == request.user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    if user.is_banned:
        raise BadRequest("User is banned")

    now = utcnow()
    lic.status = LicenseStatus.USED
    lic.used_by = user.id
    lic.used_at = now

    db.add(Subscription(
        user_id=user.id,
        subscription_name=lic.subscription_type,
        start_date=now,
        expiry_date=now + timedelta(days=lic.duration_days),
        is_active=True,
        license_id=lic.id
    ))

    await ActivityService(db).log(
        ActivityAction.LICENSE_ACTIVATED,
        details=f"License {lic.license_key} activated ({lic.duration_days} days)",
        user_id=user.id,
        username=user.username,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(lic)

    return LicenseResponse(message="License activated successfully", license=LicenseItem.model_validate(lic))


@router.post("/{license_id}/revoke", response_model=LicenseResponse)
async def revoke_license(
    license_id: int,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Revoke a license and deactivate any subscription it granted."""
    lic = await _get_license(db, license_id)
    if lic.status == LicenseStatus.REVOKED:
        raise BadRequest("License is already revoked")

    lic.status = LicenseStatus.REVOKED
    await db.execute(
        update(Subscription)
        .where(Subscription.license_id == lic.id)
        .values(is_active=False)
    )

    await ActivityService(db).log(
        ActivityAction.LICENSE_REVOKED,
        details=f"License {lic.license_key} revoked by {admin.username}",
        user_id=lic.used_by,
        ip_address=get_client_ip(req)
    )
    await db.commit()
    await db.refresh(lic)

    return LicenseResponse(message="License revoked successfully", license=LicenseItem.model_validate(lic))


@router.delete("/{license_id}", response_model=SuccessResponse)
async def delete_license(
    license_id: int,
    req: Request,
    db: DBSession,
    admin: CurrentAdmin
):
    """Delete a license key."""
    lic = await _get_license(db, license_id)
    license_key = lic.license_key

    await db.delete(lic)
    await ActivityService(db).log(
        ActivityAction.LICENSE_DELETED,
        details=f"License {license_key} deleted by {admin.username}",
        ip_address=get_client_ip(req)
    )
    await db.commit()

    return SuccessResponse(message="License deleted successfully")


def _filtered_query(status_filter: Optional[LicenseStatus], subscription_type: Optional[str]):
    query = select(License)
    if status_filter is not None:
        query = query.where(License.status == status_filter)
    if subscription_type:
        query = query.where(License.subscription_type == subscription_type)
    return query


async def _get_license(db: AsyncSession, license_id: int) -> License:
    result = await db.execute(select(License).where(License.id == license_id))
    lic = result.scalar_one_or_none()

    if lic is None:
        raise NotFound("License not found")

    return lic
