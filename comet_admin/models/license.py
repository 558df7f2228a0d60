from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comet_admin.database import Base
from comet_admin.models.enums import LicenseStatus
from comet_admin.utils.helpers import utcnow, enum_values

if TYPE_CHECKING:
    from comet_admin.models.user import User


class License(Base):
    __tablename__ = "licenses"

    id: Mapped[int] = mapped_column(primary_key=True)
    license_key: Mapped[str] = mapped_column(String(64), unique=True)
    subscription_type: Mapped[str] = mapped_column(String(50))
    duration_days: Mapped[int] = mapped_column()
    status: Mapped[LicenseStatus] = mapped_column(
        Enum(LicenseStatus, native_enum=False, values_callable=enum_values, length=20),
        default=LicenseStatus.UNUSED,
        index=True
    )
    used_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    used_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    user: Mapped[Optional["User"]] = relationship(back_populates="licenses")
