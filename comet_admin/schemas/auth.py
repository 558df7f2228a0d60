from pydantic import BaseModel, Field
from typing import Optional, Union, Literal
from datetime import datetime

from comet_admin.models.enums import AdminRole
from comet_admin.schemas.common import CamelModel


class AdminLoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    two_factor_code: Optional[str] = Field(None, max_length=10)


class AdminUserResponse(BaseModel):
    id: int
    username: str
    role: AdminRole
    email: Optional[str] = None
    two_factor_enabled: bool = False
    last_login: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginSuccessResponse(CamelModel):
    success: Literal[True] = True
    message: str = "Login successful"
    token: str
    user: AdminUserResponse


class TwoFactorRequiredResponse(CamelModel):
    success: Literal[False] = False
    message: str = "2FA code required"
    requires_2fa: bool = Field(True, alias="requires2FA")


LoginResponse = Union[LoginSuccessResponse, TwoFactorRequiredResponse]


class MeResponse(CamelModel):
    success: bool = True
    user: AdminUserResponse


class TwoFactorSetupResponse(CamelModel):
    success: bool = True
    secret: str
    qr_code: str
    otpauth_url: str


class TwoFactorVerifyRequest(CamelModel):
    secret: str = Field(..., min_length=16, max_length=64)
    code: str = Field(..., min_length=6, max_length=10)


class TwoFactorDisableRequest(CamelModel):
    code: str = Field(..., min_length=6, max_length=10)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)
