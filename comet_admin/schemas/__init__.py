from comet_admin.schemas.common import CamelModel, SuccessResponse, ErrorResponse
from comet_admin.schemas.auth import (
    AdminLoginRequest, AdminUserResponse, LoginResponse, LoginSuccessResponse,
    TwoFactorRequiredResponse, MeResponse, TwoFactorSetupResponse,
    TwoFactorVerifyRequest, TwoFactorDisableRequest, ChangePasswordRequest
)
from comet_admin.schemas.user import (
    UserCreate, UserUpdate, UserBanRequest, UserItem, UserResponse, UserListResponse
)
from comet_admin.schemas.license import (
    LicenseGenerateRequest, LicenseActivateRequest, LicenseItem, LicenseResponse, LicenseListResponse
)
from comet_admin.schemas.subscription import (
    SubscriptionCreate, SubscriptionUpdate, SubscriptionExtendRequest,
    SubscriptionItem, SubscriptionResponse, SubscriptionListResponse
)
from comet_admin.schemas.activity import ActivityLogItem, ActivityListResponse, ActivityCleanupResponse
from comet_admin.schemas.stats import StatsResponse, DashboardStats

__all__ = [
    # Common
    "CamelModel", "SuccessResponse", "ErrorResponse",
    # Auth
    "AdminLoginRequest", "AdminUserResponse", "LoginResponse", "LoginSuccessResponse",
    "TwoFactorRequiredResponse", "MeResponse", "TwoFactorSetupResponse",
    "TwoFactorVerifyRequest", "TwoFactorDisableRequest", "ChangePasswordRequest",
    # User
    "UserCreate", "UserUpdate", "UserBanRequest", "UserItem", "UserResponse", "UserListResponse",
    # License
    "LicenseGenerateRequest", "LicenseActivateRequest", "LicenseItem", "LicenseResponse", "LicenseListResponse",
    # Subscription
    "SubscriptionCreate", "SubscriptionUpdate", "SubscriptionExtendRequest",
    "SubscriptionItem", "SubscriptionResponse", "SubscriptionListResponse",
    # Activity
    "ActivityLogItem", "ActivityListResponse", "ActivityCleanupResponse",
    # Stats
    "StatsResponse", "DashboardStats",
]
