from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from comet_admin.models.enums import LicenseStatus
from comet_admin.schemas.common import CamelModel


class LicenseGenerateRequest(CamelModel):
    count: int = Field(default=1, ge=1, le=100)
    subscription_type: str = Field(..., min_length=1, max_length=50)
    duration_days: int = Field(..., ge=1, le=3650)


class LicenseActivateRequest(CamelModel):
    user_id: int


class LicenseItem(BaseModel):
    id: int
    license_key: str
    subscription_type: str
    duration_days: int
    status: LicenseStatus
    used_by: Optional[int]
    used_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class LicenseResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    license: LicenseItem


class LicenseListResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    licenses: List[LicenseItem]
    total: int
