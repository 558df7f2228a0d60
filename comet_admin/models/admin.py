from datetime import datetime
from typing import Optional
from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from comet_admin.database import Base
from comet_admin.models.enums import AdminRole
from comet_admin.utils.helpers import utcnow, enum_values


class AdminUser(Base):
    __tablename__ = "admins"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[AdminRole] = mapped_column(
        Enum(AdminRole, native_enum=False, values_callable=enum_values, length=20),
        default=AdminRole.ADMIN
    )
    # Set together with two_factor_enabled, never on its own
    two_factor_secret: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    two_factor_enabled: Mapped[bool] = mapped_column(default=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
