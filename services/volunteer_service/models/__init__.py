"""Volunteer Service models package."""

from services.volunteer_service.models.core import (
    VolunteerApplication,
    VolunteerOpportunity,
    VolunteerProfile,
)
from services.volunteer_service.models.enums import (
    ApplicationStatus,
    OpportunityStatus,
)

__all__ = [
    "ApplicationStatus",
    "OpportunityStatus",
    "VolunteerApplication",
    "VolunteerOpportunity",
    "VolunteerProfile",
]
