from comet_admin.services.activity_service import ActivityService
from comet_admin.services.auth_service import AuthService
from comet_admin.services.bootstrap import ensure_admin

__all__ = [
    "ActivityService",
    "AuthService",
    "ensure_admin",
]
