from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Optional
import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comet_admin.config import settings
from comet_admin.database import get_db
from comet_admin.exceptions import Forbidden, Unauthorized
from comet_admin.models import ADMIN_ROLES
from comet_admin.services.auth_service import AuthService
from comet_admin.utils.tokens import TokenClaims, TokenConfig, TokenError, TokenIssuer


logger = logging.getLogger(__name__)

# The verified claims are the caller's identity; no store lookup involved
Identity = TokenClaims


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Token issuer configured from settings."""
    return TokenIssuer(TokenConfig(
        signing_secret=settings.secret_key,
        token_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        algorithm=settings.jwt_algorithm,
    ))


def authenticate(authorization: Optional[str], issuer: TokenIssuer) -> Identity:
    """
    First gate: resolve an ``Authorization: Bearer <token>`` header to an
    identity. Any token problem is reported as Unauthorized.
    """
    if not authorization:
        raise Unauthorized("No token provided")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("Invalid authorization header")

    try:
        return issuer.verify(token)
    except TokenError as exc:
        logger.debug("Rejected token: %s: %s", type(exc).__name__, exc)
        raise Unauthorized() from exc


def authorize_admin(identity: Identity) -> Identity:
    """Second gate: only admin roles pass."""
    if identity.role not in ADMIN_ROLES:
        raise Forbidden()
    return identity


async def get_current_identity(
    request: Request,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)]
) -> Identity:
    """Dependency for getting the caller's identity from the JWT."""
    identity = authenticate(request.headers.get("Authorization"), issuer)
    request.state.identity = identity
    return identity


async def get_current_admin(
    identity: Annotated[Identity, Depends(get_current_identity)]
) -> Identity:
    """Dependency for routes restricted to admin roles."""
    return authorize_admin(identity)


def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)]
) -> AuthService:
    return AuthService(db, issuer, totp_window=settings.totp_valid_window)


# Type aliases for dependency injection
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
CurrentAdmin = Annotated[Identity, Depends(get_current_admin)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
