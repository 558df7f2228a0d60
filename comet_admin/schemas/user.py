from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from comet_admin.models.enums import UserStatus
from comet_admin.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=6, max_length=72)
    email: Optional[EmailStr] = None
    hwid: Optional[str] = Field(None, max_length=255)

    @field_validator("email", "hwid", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # Dashboard forms send "" for fields left empty
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    hwid: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=6, max_length=72)

    @field_validator("email", "hwid", "password", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UserBanRequest(CamelModel):
    is_banned: bool
    reason: Optional[str] = Field(None, max_length=500)


class UserItem(BaseModel):
    id: int
    username: str
    email: Optional[str]
    hwid: Optional[str]
    status: UserStatus
    is_banned: bool
    ban_reason: Optional[str]
    created_at: datetime
    last_login: Optional[datetime]

    model_config = {"from_attributes": True}


class UserResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    user: UserItem


class UserListResponse(CamelModel):
    success: bool = True
    users: List[UserItem]
    total: int
    limit: int
    offset: int
