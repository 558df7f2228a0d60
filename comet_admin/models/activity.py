from datetime import datetime
from typing import Optional
from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comet_admin.database import Base
from comet_admin.models.enums import ActivityAction
from comet_admin.utils.helpers import utcnow, enum_values


class ActivityLog(Base):
    """Append-only audit trail of admin actions."""
    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    action: Mapped[ActivityAction] = mapped_column(
        Enum(ActivityAction, native_enum=False, values_callable=enum_values, length=50),
        index=True
    )
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)  # IPv4 or IPv6
    timestamp: Mapped[datetime] = mapped_column(default=utcnow, index=True)
