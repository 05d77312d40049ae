"""Shared lookups and permission checks for the volunteer service."""

import uuid
from typing import Any, Optional

from fastapi import HTTPException
from libs.auth.models import AuthUser
from services.volunteer_service.models import (
    ApplicationStatus,
    VolunteerApplication,
    VolunteerOpportunity,
    VolunteerProfile,
)
from services.volunteer_service.schemas import (
    ApplicationDetailResponse,
    ApplicationStats,
    OpportunityResponse,
)
from sqlalchemy import String, Uuid, column, func, select, table
from sqlalchemy.ext.asyncio import AsyncSession

# Clubs live in the clubs service; only the columns read here are declared.
clubs_table = table(
    "clubs",
    column("id", Uuid),
    column("name", String),
    column("contact_email", String),
    column("application_status", String),
)

CLUB_APPROVED = "approved"


# ── Clubs (soft reference) ──────────────────────────────────────────


async def get_club_summary(db: AsyncSession, club_id: uuid.UUID) -> Optional[Any]:
    return (
        await db.execute(select(clubs_table).where(clubs_table.c.id == club_id))
    ).one_or_none()


async def club_names(db: AsyncSession, club_ids: set[uuid.UUID]) -> dict[uuid.UUID, str]:
    if not club_ids:
        return {}
    rows = await db.execute(
        select(clubs_table.c.id, clubs_table.c.name).where(
            clubs_table.c.id.in_(club_ids)
        )
    )
    return {row.id: row.name for row in rows}


async def owned_club_ids(db: AsyncSession, user: AuthUser) -> list[uuid.UUID]:
    if not user.email:
        return []
    rows = await db.execute(
        select(clubs_table.c.id).where(
            func.lower(clubs_table.c.contact_email) == user.email.lower()
        )
    )
    return list(rows.scalars())


async def require_club_owner(
    db: AsyncSession,
    club_id: uuid.UUID,
    user: AuthUser,
    *,
    require_approved: bool = False,
) -> Any:
    """Return the club row when `user` may manage it, else raise."""
    club = await get_club_summary(db, club_id)
    if club is None:
        raise HTTPException(status_code=404, detail="Club not found")
    if not user.is_admin and not user.owns_email(club.contact_email):
        raise HTTPException(
            status_code=403, detail="You do not manage this club"
        )
    if require_approved and club.application_status != CLUB_APPROVED:
        raise HTTPException(
            status_code=400,
            detail="Club must be approved before posting opportunities",
        )
    return club


def approved_clubs_subquery():
    return select(clubs_table.c.id).where(
        clubs_table.c.application_status == CLUB_APPROVED
    )


# ── Profiles ────────────────────────────────────────────────────────


async def get_profile_by_user(
    db: AsyncSession, user_id: str
) -> Optional[VolunteerProfile]:
    return (
        await db.execute(
            select(VolunteerProfile).where(VolunteerProfile.user_id == user_id)
        )
    ).scalar_one_or_none()


async def require_own_profile(db: AsyncSession, user: AuthUser) -> VolunteerProfile:
    profile = await get_profile_by_user(db, user.user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Volunteer profile not found")
    return profile


# ── Opportunities ───────────────────────────────────────────────────


async def get_opportunity_or_404(
    db: AsyncSession, opportunity_id: uuid.UUID
) -> VolunteerOpportunity:
    opp = (
        await db.execute(
            select(VolunteerOpportunity).where(
                VolunteerOpportunity.id == opportunity_id
            )
        )
    ).scalar_one_or_none()
    if not opp:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return opp


def opportunity_response(
    opp: VolunteerOpportunity, club_name: Optional[str] = None
) -> OpportunityResponse:
    resp = OpportunityResponse.model_validate(opp)
    resp.club_name = club_name
    return resp


async def opportunity_responses(
    db: AsyncSession, opportunities: list[VolunteerOpportunity]
) -> list[OpportunityResponse]:
    names = await club_names(db, {opp.club_id for opp in opportunities})
    return [opportunity_response(opp, names.get(opp.club_id)) for opp in opportunities]


# ── Applications ────────────────────────────────────────────────────


async def get_application_or_404(
    db: AsyncSession, application_id: uuid.UUID
) -> VolunteerApplication:
    app = (
        await db.execute(
            select(VolunteerApplication).where(VolunteerApplication.id == application_id)
        )
    ).scalar_one_or_none()
    if not app:
        raise HTTPException(status_code=404, detail="Application not found")
    return app


async def application_details(
    db: AsyncSession, applications: list[VolunteerApplication]
) -> list[ApplicationDetailResponse]:
    """Attach opportunity titles and volunteer names to applications."""
    opp_ids = {a.opportunity_id for a in applications}
    vol_ids = {a.volunteer_id for a in applications}
    opps = {}
    vols = {}
    if opp_ids:
        rows = await db.execute(
            select(VolunteerOpportunity).where(VolunteerOpportunity.id.in_(opp_ids))
        )
        opps = {o.id: o for o in rows.scalars()}
    if vol_ids:
        rows = await db.execute(
            select(VolunteerProfile).where(VolunteerProfile.id.in_(vol_ids))
        )
        vols = {v.id: v for v in rows.scalars()}

    details = []
    for a in applications:
        detail = ApplicationDetailResponse.model_validate(a)
        opp = opps.get(a.opportunity_id)
        vol = vols.get(a.volunteer_id)
        detail.opportunity_title = opp.title if opp else None
        detail.volunteer_name = vol.full_name if vol else None
        detail.volunteer_email = vol.email if vol else None
        details.append(detail)
    return details


async def application_stats(db: AsyncSession, *filters) -> ApplicationStats:
    rows = await db.execute(
        select(VolunteerApplication.status, func.count(VolunteerApplication.id))
        .where(*filters)
        .group_by(VolunteerApplication.status)
    )
    stats = ApplicationStats()
    for status, count in rows:
        status = ApplicationStatus(status)
        setattr(stats, status.value, count)
        stats.total += count
    return stats
