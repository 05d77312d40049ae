"""Admin activity audit trail."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.clubs_service.models.enums import (
    AdminActionType,
    AdminTargetType,
    enum_values,
)
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class AdminActivityLog(Base):
    """Tracks admin actions on club applications, reports and the log itself."""

    __tablename__ = "admin_activity_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    admin_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    action_type: Mapped[AdminActionType] = mapped_column(
        SAEnum(
            AdminActionType,
            name="admin_action_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    target_type: Mapped[AdminTargetType] = mapped_column(
        SAEnum(
            AdminTargetType,
            name="admin_target_type_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )
    target_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    target_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<AdminActivityLog {self.admin_id} {self.action_type.value}>"
