import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.volunteer_service.models.enums import (
    ApplicationStatus,
    OpportunityStatus,
    enum_values,
)
from sqlalchemy import JSON, Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# MODELS
# ============================================================================


class VolunteerProfile(Base):
    """Public-facing volunteer profile, one per auth user."""

    __tablename__ = "volunteer_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    skills: Mapped[list] = mapped_column(JSON, default=list)
    availability: Mapped[list] = mapped_column(JSON, default=list)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    applications: Mapped[list["VolunteerApplication"]] = relationship(
        back_populates="volunteer", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<VolunteerProfile {self.full_name}>"


class VolunteerOpportunity(Base):
    """A volunteer need posted by a club."""

    __tablename__ = "volunteer_opportunities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Soft reference to clubs.id (owned by the clubs service)
    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    required_skills: Mapped[list] = mapped_column(JSON, default=list)
    time_commitment: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[OpportunityStatus] = mapped_column(
        SAEnum(
            OpportunityStatus,
            name="opportunity_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=OpportunityStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    applications: Mapped[list["VolunteerApplication"]] = relationship(
        back_populates="opportunity", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<VolunteerOpportunity {self.title} ({self.status.value})>"


class VolunteerApplication(Base):
    """A volunteer's application to an opportunity."""

    __tablename__ = "volunteer_applications"
    __table_args__ = (
        UniqueConstraint(
            "opportunity_id", "volunteer_id", name="uq_application_per_volunteer"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    opportunity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("volunteer_opportunities.id", ondelete="CASCADE"), index=True
    )
    volunteer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("volunteer_profiles.id", ondelete="CASCADE"), index=True
    )
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="volunteer_application_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ApplicationStatus.PENDING,
        nullable=False,
        index=True,
    )
    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    opportunity: Mapped[VolunteerOpportunity] = relationship(
        back_populates="applications"
    )
    volunteer: Mapped[VolunteerProfile] = relationship(back_populates="applications")

    def __repr__(self) -> str:
        return f"<VolunteerApplication {self.id} {self.status.value}>"
