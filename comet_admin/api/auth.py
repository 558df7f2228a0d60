from fastapi import APIRouter, Request

from comet_admin.api.deps import Auth, CurrentIdentity
from comet_admin.middleware.security import get_client_ip
from comet_admin.schemas.auth import (
    AdminLoginRequest, AdminUserResponse, LoginResponse, LoginSuccessResponse,
    TwoFactorRequiredResponse, MeResponse, TwoFactorSetupResponse,
    TwoFactorVerifyRequest, TwoFactorDisableRequest, ChangePasswordRequest
)
from comet_admin.schemas.common import SuccessResponse
from comet_admin.services.auth_service import TwoFactorRequired


router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def admin_login(request: AdminLoginRequest, req: Request, auth: Auth):
    """
    Admin login endpoint.

    When the account has 2FA enabled and no code was sent, answers 200 with
    ``requires2FA`` and no token.
    """
    result = await auth.login(
        username=request.username,
        password=request.password,
        two_factor_code=request.two_factor_code,
        ip_address=get_client_ip(req)
    )

    if isinstance(result, TwoFactorRequired):
        return TwoFactorRequiredResponse()

    return LoginSuccessResponse(
        token=result.token,
        user=AdminUserResponse.model_validate(result.admin)
    )


@router.get("/me", response_model=MeResponse)
async def get_current_admin_info(identity: CurrentIdentity, auth: Auth):
    """Get current admin user info."""
    admin = await auth.get_admin(identity)
    return MeResponse(user=AdminUserResponse.model_validate(admin))


@router.post("/2fa/enable", response_model=TwoFactorSetupResponse)
async def enable_two_factor(identity: CurrentIdentity, auth: Auth):
    """Start 2FA enrollment. The secret is not stored until verified."""
    pending = await auth.enable_2fa(identity)
    return TwoFactorSetupResponse(
        secret=pending.secret,
        qr_code=pending.qr_code,
        otpauth_url=pending.otpauth_url
    )


@router.post("/2fa/verify", response_model=SuccessResponse)
async def verify_two_factor(
    request: TwoFactorVerifyRequest,
    req: Request,
    identity: CurrentIdentity,
    auth: Auth
):
    """Confirm the pending secret with a code and turn 2FA on."""
    await auth.verify_2fa(identity, request.secret, request.code, ip_address=get_client_ip(req))
    return SuccessResponse(message="2FA enabled successfully")


@router.post("/2fa/disable", response_model=SuccessResponse)
async def disable_two_factor(
    request: TwoFactorDisableRequest,
    req: Request,
    identity: CurrentIdentity,
    auth: Auth
):
    """Turn 2FA off. Requires a valid code for the current secret."""
    await auth.disable_2fa(identity, request.code, ip_address=get_client_ip(req))
    return SuccessResponse(message="2FA disabled successfully")


@router.post("/change-password", response_model=SuccessResponse)
async def change_admin_password(
    request: ChangePasswordRequest,
    req: Request,
    identity: CurrentIdentity,
    auth: Auth
):
    """Change admin password."""
    await auth.change_password(
        identity,
        request.current_password,
        request.new_password,
        ip_address=get_client_ip(req)
    )
    return SuccessResponse(message="Password changed successfully")
