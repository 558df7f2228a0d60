from comet_admin.utils.security import (
    verify_password, get_password_hash, generate_password,
    generate_totp_secret, get_totp_uri, verify_totp, render_qr_data_url
)
from comet_admin.utils.helpers import utcnow, generate_license_key

__all__ = [
    "verify_password", "get_password_hash", "generate_password",
    "generate_totp_secret", "get_totp_uri", "verify_totp", "render_qr_data_url",
    "utcnow", "generate_license_key"
]
