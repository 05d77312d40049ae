"""Volunteer Service business logic package."""

from services.volunteer_service.services.main import (
    CLUB_APPROVED,
    application_details,
    application_stats,
    approved_clubs_subquery,
    club_names,
    clubs_table,
    get_application_or_404,
    get_club_summary,
    get_opportunity_or_404,
    get_profile_by_user,
    opportunity_response,
    opportunity_responses,
    owned_club_ids,
    require_club_owner,
    require_own_profile,
)

__all__ = [
    "CLUB_APPROVED",
    "application_details",
    "application_stats",
    "approved_clubs_subquery",
    "club_names",
    "clubs_table",
    "get_application_or_404",
    "get_club_summary",
    "get_opportunity_or_404",
    "get_profile_by_user",
    "opportunity_response",
    "opportunity_responses",
    "owned_club_ids",
    "require_club_owner",
    "require_own_profile",
]
