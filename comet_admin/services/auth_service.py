"""
Admin login and two-factor authentication flows
"""
from dataclasses import dataclass
from typing import Optional, Union
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.exceptions import (
    BadRequest, InvalidCredentials, Invalid2FACode, InvalidCurrentPassword,
    TwoFactorNotEnabled, Unauthorized
)
from comet_admin.models import AdminUser, ActivityAction
from comet_admin.services.activity_service import ActivityService
from comet_admin.utils.helpers import utcnow
from comet_admin.utils.security import (
    verify_password, dummy_verify, get_password_hash, generate_totp_secret,
    is_valid_totp_secret, get_totp_uri, verify_totp, render_qr_data_url
)
from comet_admin.utils.tokens import TokenClaims, TokenIssuer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginSuccess:
    token: str
    admin: AdminUser


@dataclass(frozen=True)
class TwoFactorRequired:
    """Password was correct but the account needs a TOTP code. No token issued."""


LoginResult = Union[LoginSuccess, TwoFactorRequired]


@dataclass(frozen=True)
class PendingSecret:
    secret: str
    otpauth_url: str
    qr_code: str


class AuthService:
    """Orchestrates password checks, TOTP and token issuing for admins"""

    def __init__(self, db: AsyncSession, issuer: TokenIssuer, totp_window: Optional[int] = None):
        self.db = db
        self.issuer = issuer
        self.totp_window = totp_window
        self.activity = ActivityService(db)

    async def login(
        self,
        username: str,
        password: str,
        two_factor_code: Optional[str] = None,
        ip_address: Optional[str] = None
    ) -> LoginResult:
        admin = await self._get_by_username(username)

        if admin is None:
            dummy_verify()
            await self._record_failure(username, ip_address, "Invalid credentials")
            raise InvalidCredentials()

        if not verify_password(password, admin.password_hash):
            await self._record_failure(username, ip_address, "Invalid credentials")
            raise InvalidCredentials()

        if admin.two_factor_enabled:
            if not two_factor_code:
                return TwoFactorRequired()
            if not verify_totp(admin.two_factor_secret, two_factor_code, self.totp_window):
                await self._record_failure(username, ip_address, "Invalid 2FA code")
                raise Invalid2FACode()

        admin.last_login = utcnow()
        await self.activity.log(
            ActivityAction.ADMIN_LOGIN,
            details=f"Admin {admin.username} logged in",
            username=admin.username,
            ip_address=ip_address
        )
        await self.db.commit()

        token = self.issuer.issue(
            TokenClaims(id=admin.id, username=admin.username, role=admin.role)
        )
        logger.info("Admin %s logged in from %s", admin.username, ip_address or "unknown")
        return LoginSuccess(token=token, admin=admin)

    async def get_admin(self, identity: TokenClaims) -> AdminUser:
        """Load the admin behind a verified token."""
        result = await self.db.execute(select(AdminUser).where(AdminUser.id == identity.id))
        admin = result.scalar_one_or_none()
        if admin is None:
            raise Unauthorized("User not found")
        return admin

    async def enable_2fa(self, identity: TokenClaims) -> PendingSecret:
        """
        Generate a new secret for enrollment. Nothing is stored until the
        admin proves possession of it through verify_2fa.
        """
        admin = await self.get_admin(identity)
        if admin.two_factor_enabled:
            raise BadRequest("2FA is already enabled")

        secret = generate_totp_secret()
        otpauth_url = get_totp_uri(secret, admin.username)
        return PendingSecret(
            secret=secret,
            otpauth_url=otpauth_url,
            qr_code=render_qr_data_url(otpauth_url)
        )

    async def verify_2fa(
        self,
        identity: TokenClaims,
        secret: str,
        code: str,
        ip_address: Optional[str] = None
    ) -> None:
        """Confirm a pending secret and switch 2FA on."""
        admin = await self.get_admin(identity)
        if admin.two_factor_enabled:
            raise BadRequest("2FA is already enabled")
        if not is_valid_totp_secret(secret):
            raise BadRequest("Invalid 2FA secret")
        if not verify_totp(secret, code, self.totp_window):
            raise Invalid2FACode(status_code=400)

        # Secret and flag change in one statement
        await self.db.execute(
            update(AdminUser)
            .where(AdminUser.id == admin.id)
            .values(two_factor_secret=secret, two_factor_enabled=True)
        )
        await self.activity.log(
            ActivityAction.TWO_FACTOR_ENABLED,
            details=f"2FA enabled for {admin.username}",
            username=admin.username,
            ip_address=ip_address
        )
        await self.db.commit()
        logger.info("2FA enabled for admin %s", admin.username)

    async def disable_2fa(
        self,
        identity: TokenClaims,
        code: str,
        ip_address: Optional[str] = None
    ) -> None:
        admin = await self.get_admin(identity)
        if not admin.two_factor_enabled:
            raise TwoFactorNotEnabled()
        if not verify_totp(admin.two_factor_secret, code, self.totp_window):
            raise Invalid2FACode(status_code=400)

        await self.db.execute(
            update(AdminUser)
            .where(AdminUser.id == admin.id)
            .values(two_factor_secret=None, two_factor_enabled=False)
        )
        await self.activity.log(
            ActivityAction.TWO_FACTOR_DISABLED,
            details=f"2FA disabled for {admin.username}",
            username=admin.username,
            ip_address=ip_address
        )
        await self.db.commit()
        logger.info("2FA disabled for admin %s", admin.username)

    async def change_password(
        self,
        identity: TokenClaims,
        current_password: str,
        new_password: str,
        ip_address: Optional[str] = None
    ) -> None:
        """
        Replace the admin's password. Tokens issued before the change stay
        valid until they expire; there is no revocation list.
        """
        admin = await self.get_admin(identity)
        if not verify_password(current_password, admin.password_hash):
            raise InvalidCurrentPassword()

        await self.db.execute(
            update(AdminUser)
            .where(AdminUser.id == admin.id)
            .values(password_hash=get_password_hash(new_password))
        )
        await self.activity.log(
            ActivityAction.PASSWORD_CHANGED,
            details=f"Password changed for {admin.username}",
            username=admin.username,
            ip_address=ip_address
        )
        await self.db.commit()
        logger.info("Password changed for admin %s", admin.username)

    async def _get_by_username(self, username: str) -> Optional[AdminUser]:
        result = await self.db.execute(
            select(AdminUser).where(AdminUser.username == username)
        )
        return result.scalar_one_or_none()

    async def _record_failure(self, username: str, ip_address: Optional[str], reason: str) -> None:
        await self.activity.log(
            ActivityAction.ADMIN_LOGIN_FAILED,
            details=f"Failed login: {reason}",
            username=username,
            ip_address=ip_address
        )
        await self.db.commit()
        logger.warning("Failed admin login for %r from %s: %s", username, ip_address or "unknown", reason)
