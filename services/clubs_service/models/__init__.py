"""Clubs Service models package."""

from services.clubs_service.models.audit import AdminActivityLog
from services.clubs_service.models.club import Club, ClubApplicationHistory
from services.clubs_service.models.enums import (
    AdminActionType,
    AdminTargetType,
    ApplicationStatus,
)

__all__ = [
    "AdminActionType",
    "AdminActivityLog",
    "AdminTargetType",
    "ApplicationStatus",
    "Club",
    "ClubApplicationHistory",
]
