from datetime import datetime
from typing import Optional, List, TYPE_CHECKING
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comet_admin.database import Base
from comet_admin.models.enums import UserStatus
from comet_admin.utils.helpers import utcnow

if TYPE_CHECKING:
    from comet_admin.models.license import License
    from comet_admin.models.subscription import Subscription


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    hwid: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_banned: Mapped[bool] = mapped_column(default=False)
    ban_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    last_login: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    # Relationships
    subscriptions: Mapped[List["Subscription"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )
    licenses: Mapped[List["License"]] = relationship(back_populates="user")

    @property
    def status(self) -> UserStatus:
        return UserStatus.BANNED if self.is_banned else UserStatus.ACTIVE
