from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comet_admin.database import Base
from comet_admin.utils.helpers import utcnow

if TYPE_CHECKING:
    from comet_admin.models.user import User


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    subscription_name: Mapped[str] = mapped_column(String(100))
    start_date: Mapped[datetime] = mapped_column(default=utcnow)
    expiry_date: Mapped[datetime] = mapped_column(index=True)
    is_active: Mapped[bool] = mapped_column(default=True)
    license_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("licenses.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    user: Mapped["User"] = relationship(back_populates="subscriptions")
