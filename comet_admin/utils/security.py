from datetime import datetime
from typing import Optional, Union
import base64
import binascii
import io
import re
import secrets
import string

from passlib.context import CryptContext
import pyotp
import qrcode

from comet_admin.config import settings


TOTP_DIGITS = 6
TOTP_INTERVAL = 30  # seconds
TOTP_SECRET_MIN_LENGTH = 32  # base32 chars, 160 bits

_BASE32_RE = re.compile(r"^[A-Z2-7]+=*$")

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verify when there is no hash to check."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


def generate_password(length: int = 16) -> str:
    """Generate a random password."""
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_totp_secret() -> str:
    """Generate new TOTP secret."""
    return pyotp.random_base32(length=TOTP_SECRET_MIN_LENGTH)


def is_valid_totp_secret(secret: Optional[str]) -> bool:
    """Check that a secret is base32 and long enough to be one we issued."""
    if not secret or len(secret.rstrip("=")) < TOTP_SECRET_MIN_LENGTH:
        return False
    return bool(_BASE32_RE.match(secret))


def get_totp_uri(secret: str, label: str, issuer: Optional[str] = None) -> str:
    """Get TOTP provisioning URI for QR code."""
    totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
    return totp.provisioning_uri(name=label, issuer_name=issuer or settings.totp_issuer)


def verify_totp(
    secret: Optional[str],
    code: Optional[str],
    valid_window: Optional[int] = None,
    for_time: Optional[Union[datetime, int]] = None,
) -> bool:
    """
    Verify a TOTP code.

    Codes for any time step within ``valid_window`` steps of ``for_time``
    (default: now) are accepted, to absorb clock drift between the server
    and the authenticator app. Each candidate is compared in constant time.
    """
    if not secret or not code:
        return False
    code = code.strip()
    if len(code) != TOTP_DIGITS or not code.isdigit():
        return False
    if valid_window is None:
        valid_window = settings.totp_valid_window

    totp = pyotp.TOTP(secret, digits=TOTP_DIGITS, interval=TOTP_INTERVAL)
    try:
        if for_time is None:
            return totp.verify(code, valid_window=valid_window)
        return totp.verify(code, for_time=for_time, valid_window=valid_window)
    except (binascii.Error, ValueError):
        return False


def render_qr_data_url(data: str) -> str:
    """Render ``data`` as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    buf.seek(0)
    return f"data:image/png;base64,{base64.b64encode(buf.getvalue()).decode()}"
