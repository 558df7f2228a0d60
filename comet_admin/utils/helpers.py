from typing import Optional
from datetime import datetime, timezone
import enum
import secrets


LICENSE_KEY_GROUPS = 4
LICENSE_KEY_GROUP_BYTES = 2


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum members by value rather than by name."""
    return [member.value for member in enum_cls]


def generate_license_key() -> str:
    """Generate an opaque license key like ``9F3A-01BC-77D2-E4A0``."""
    return "-".join(
        secrets.token_hex(LICENSE_KEY_GROUP_BYTES).upper()
        for _ in range(LICENSE_KEY_GROUPS)
    )


def get_subscription_status(expiry_date: Optional[datetime], is_active: bool = True) -> tuple[str, Optional[int]]:
    """
    Get subscription status and days left.
    Returns: (status, days_left)
    Status: "active" | "expiring" | "expired" | "inactive" | "none"
    """
    if expiry_date is None:
        return ("none", None)

    now = utcnow()
    days_left = (expiry_date - now).days

    if expiry_date <= now:
        return ("expired", days_left)
    elif not is_active:
        return ("inactive", days_left)
    elif days_left < 7:
        return ("expiring", days_left)
    else:
        return ("active", days_left)
