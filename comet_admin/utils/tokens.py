"""
Session token issuing and verification.

Tokens are HS256 JWTs carrying the admin id, username and role plus the
standard ``iat``/``exp`` claims. They are stateless: nothing is stored server
side, so a token stays valid until it expires or the signing key changes.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from comet_admin.models.enums import AdminRole


class TokenError(Exception):
    """Base class for token verification failures."""


class BadSignature(TokenError):
    pass


class Expired(TokenError):
    pass


class Malformed(TokenError):
    pass


@dataclass(frozen=True)
class TokenConfig:
    signing_secret: str
    token_ttl: timedelta = timedelta(hours=24)
    algorithm: str = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    id: int
    username: str
    role: AdminRole
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenIssuer:
    """Mints and validates signed session tokens."""

    def __init__(self, config: TokenConfig):
        if not config.signing_secret:
            raise ValueError("Token signing secret must not be empty")
        self.config = config

    def issue(self, claims: TokenClaims, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``claims`` valid for the configured TTL."""
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.config.token_ttl

        payload = {
            "id": claims.id,
            "username": claims.username,
            "role": AdminRole(claims.role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self.config.signing_secret, algorithm=self.config.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode ``token`` and check its signature and expiry.

        Raises Malformed, BadSignature or Expired.
        """
        if not token:
            raise Malformed("Empty token")

        # Structure first, so garbage is not reported as a signature problem
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise Malformed(str(exc)) from exc

        try:
            payload = jwt.decode(
                token,
                self.config.signing_secret,
                algorithms=[self.config.algorithm],
            )
        except ExpiredSignatureError as exc:
            raise Expired("Token has expired") from exc
        except JWTError as exc:
            raise BadSignature(str(exc)) from exc

        return self._claims_from_payload(payload)

    @staticmethod
    def _claims_from_payload(payload: dict) -> TokenClaims:
        try:
            admin_id = payload["id"]
            username = payload["username"]
            role = AdminRole(payload["role"])
        except (KeyError, ValueError) as exc:
            raise Malformed("Token claims are incomplete") from exc

        if not isinstance(admin_id, int) or isinstance(admin_id, bool) or not isinstance(username, str):
            raise Malformed("Token claims have unexpected types")

        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        return TokenClaims(
            id=admin_id,
            username=username,
            role=role,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc) if issued_at is not None else None,
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at is not None else None,
        )
