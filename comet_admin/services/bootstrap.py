"""
Out-of-band admin account provisioning (first run and password reset)
"""
from typing import Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.models import AdminUser, AdminRole
from comet_admin.utils.security import get_password_hash


logger = logging.getLogger(__name__)


async def ensure_admin(
    db: AsyncSession,
    username: str,
    password: str,
    role: AdminRole = AdminRole.SUPERADMIN,
    email: Optional[str] = None,
    reset_password: bool = False
) -> tuple[AdminUser, bool]:
    """
    Create the admin account if it does not exist.

    With ``reset_password`` an existing account gets ``password`` as its new
    password. Returns the admin and whether it was created.
    """
    result = await db.execute(select(AdminUser).where(AdminUser.username == username))
    admin = result.scalar_one_or_none()

    if admin is None:
        admin = AdminUser(
            username=username,
            password_hash=get_password_hash(password),
            email=email,
            role=role
        )
        db.add(admin)
        await db.commit()
        await db.refresh(admin)
        logger.info("Created admin user %s (%s)", username, role.value)
        return admin, True

    if reset_password:
        await db.execute(
            update(AdminUser)
            .where(AdminUser.id == admin.id)
            .values(password_hash=get_password_hash(password))
        )
        await db.commit()
        logger.info("Reset password for admin user %s", username)

    return admin, False
