import enum


class AdminRole(str, enum.Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MODERATOR = "moderator"


# Roles allowed through the admin-only gate
ADMIN_ROLES = frozenset({AdminRole.SUPERADMIN, AdminRole.ADMIN})


class LicenseStatus(str, enum.Enum):
    UNUSED = "unused"
    USED = "used"
    REVOKED = "revoked"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    BANNED = "banned"


class ActivityAction(str, enum.Enum):
    ADMIN_LOGIN = "admin_login"
    ADMIN_LOGIN_FAILED = "admin_login_failed"
    PASSWORD_CHANGED = "password_changed"
    TWO_FACTOR_ENABLED = "2fa_enabled"
    TWO_FACTOR_DISABLED = "2fa_disabled"

    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    USER_BANNED = "user_banned"
    USER_UNBANNED = "user_unbanned"
    USER_HWID_RESET = "user_hwid_reset"

    LICENSES_GENERATED = "licenses_generated"
    LICENSE_ACTIVATED = "license_activated"
    LICENSE_REVOKED = "license_revoked"
    LICENSE_DELETED = "license_deleted"

    SUBSCRIPTION_CREATED = "subscription_created"
    SUBSCRIPTION_UPDATED = "subscription_updated"
    SUBSCRIPTION_EXTENDED = "subscription_extended"
    SUBSCRIPTION_DELETED = "subscription_deleted"

    LOGS_CLEANED = "logs_cleaned"
