"""Club and club application history models."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.clubs_service.models.enums import ApplicationStatus, enum_values
from sqlalchemy import JSON, Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Club(Base):
    """A sports club. The contact email identifies the owning account."""

    __tablename__ = "clubs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    contact_email: Mapped[str] = mapped_column(
        String(320), unique=True, index=True, nullable=False
    )
    contact_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    sport_types: Mapped[list] = mapped_column(JSON, default=list)
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    application_status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="club_application_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ApplicationStatus.PENDING,
        nullable=False,
        index=True,
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    history: Mapped[list["ClubApplicationHistory"]] = relationship(
        back_populates="club",
        cascade="all, delete-orphan",
        order_by="ClubApplicationHistory.created_at",
    )

    def __repr__(self) -> str:
        return f"<Club {self.name} ({self.application_status.value})>"


class ClubApplicationHistory(Base):
    """One row per status transition of a club application."""

    __tablename__ = "club_application_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clubs.id", ondelete="CASCADE"), index=True
    )
    admin_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    action: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="club_application_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )

    club: Mapped[Club] = relationship(back_populates="history")

    def __repr__(self) -> str:
        return f"<ClubApplicationHistory {self.club_id} {self.action.value}>"
