from comet_admin.models.enums import AdminRole, ADMIN_ROLES, LicenseStatus, UserStatus, ActivityAction
from comet_admin.models.admin import AdminUser
from comet_admin.models.user import User
from comet_admin.models.license import License
from comet_admin.models.subscription import Subscription
from comet_admin.models.activity import ActivityLog

__all__ = [
    "AdminRole",
    "ADMIN_ROLES",
    "LicenseStatus",
    "UserStatus",
    "ActivityAction",
    "AdminUser",
    "User",
    "License",
    "Subscription",
    "ActivityLog",
]
