"""Volunteer opportunity endpoints.

Opportunities belong to clubs. Anyone signed in may browse the active
opportunities of approved clubs; the club's contact (or an admin) manages them.
"""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.volunteer_service.models import OpportunityStatus, VolunteerOpportunity
from services.volunteer_service.schemas import (
    OpportunityCreate,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunityStatusUpdate,
    OpportunityUpdate,
    VolunteerCountResponse,
)
from services.volunteer_service.services import (
    CLUB_APPROVED,
    approved_clubs_subquery,
    get_club_summary,
    get_opportunity_or_404,
    opportunity_response,
    opportunity_responses,
    owned_club_ids,
    require_club_owner,
)
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/opportunities", tags=["opportunities"])


def _browse_filters():
    return [
        VolunteerOpportunity.status == OpportunityStatus.ACTIVE,
        VolunteerOpportunity.club_id.in_(approved_clubs_subquery()),
    ]


async def _can_manage(db: AsyncSession, opp: VolunteerOpportunity, user: AuthUser) -> bool:
    if user.is_admin:
        return True
    return opp.club_id in await owned_club_ids(db, user)


# ── Browsing ────────────────────────────────────────────────────────


@router.get("", response_model=OpportunityListResponse)
async def list_opportunities(
    club_id: Optional[uuid.UUID] = None,
    location: Optional[str] = None,
    skills: Optional[list[str]] = Query(None),
    time_commitment: Optional[str] = None,
    is_recurring: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Active opportunities of approved clubs, newest first."""
    filters = _browse_filters()
    if club_id:
        filters.append(VolunteerOpportunity.club_id == club_id)
    if location:
        filters.append(VolunteerOpportunity.location.ilike(f"%{location}%"))
    if time_commitment:
        filters.append(VolunteerOpportunity.time_commitment.ilike(f"%{time_commitment}%"))
    if is_recurring is not None:
        filters.append(VolunteerOpportunity.is_recurring.is_(is_recurring))
    if search:
        filters.append(
            or_(
                VolunteerOpportunity.title.ilike(f"%{search}%"),
                VolunteerOpportunity.description.ilike(f"%{search}%"),
            )
        )

    rows = (
        await db.execute(
            select(VolunteerOpportunity)
            .where(*filters)
            .order_by(VolunteerOpportunity.created_at.desc())
        )
    ).scalars().all()
    if skills:
        wanted = {s.lower() for s in skills}
        rows = [
            o for o in rows if wanted & {s.lower() for s in o.required_skills or []}
        ]

    page = rows[skip : skip + limit]
    return OpportunityListResponse(
        opportunities=await opportunity_responses(db, page),
        total=len(rows),
        skip=skip,
        limit=limit,
    )


@router.get("/recent", response_model=list[OpportunityResponse])
async def recent_opportunities(
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_async_db),
):
    rows = await db.execute(
        select(VolunteerOpportunity)
        .where(*_browse_filters())
        .order_by(VolunteerOpportunity.created_at.desc())
        .limit(limit)
    )
    return await opportunity_responses(db, list(rows.scalars()))


@router.get("/count", response_model=VolunteerCountResponse)
async def count_opportunities(db: AsyncSession = Depends(get_async_db)):
    count = await db.scalar(
        select(func.count(VolunteerOpportunity.id)).where(*_browse_filters())
    )
    return VolunteerCountResponse(count=count or 0)


@router.get("/mine", response_model=list[OpportunityResponse])
async def my_club_opportunities(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Every opportunity of the caller's clubs, whatever its status."""
    club_ids = await owned_club_ids(db, user)
    if not club_ids:
        return []
    rows = await db.execute(
        select(VolunteerOpportunity)
        .where(VolunteerOpportunity.club_id.in_(club_ids))
        .order_by(VolunteerOpportunity.created_at.desc())
    )
    return await opportunity_responses(db, list(rows.scalars()))


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
async def get_opportunity(
    opportunity_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    opp = await get_opportunity_or_404(db, opportunity_id)
    club = await get_club_summary(db, opp.club_id)
    public = (
        club is not None
        and club.application_status == CLUB_APPROVED
        and opp.status == OpportunityStatus.ACTIVE
    )
    if not public and not await _can_manage(db, opp, user):
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return opportunity_response(opp, club.name if club else None)


# ── Management ──────────────────────────────────────────────────────


@router.post("", response_model=OpportunityResponse, status_code=201)
async def create_opportunity(
    data: OpportunityCreate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Post an opportunity for a club the caller manages. The club must be approved."""
    club = await require_club_owner(db, data.club_id, user, require_approved=True)
    opp = VolunteerOpportunity(**data.model_dump(), status=OpportunityStatus.ACTIVE)
    db.add(opp)
    await db.commit()
    await db.refresh(opp)
    logger.info(f"Club {club.id} posted opportunity {opp.id}")
    return opportunity_response(opp, club.name)


@router.patch("/{opportunity_id}", response_model=OpportunityResponse)
async def update_opportunity(
    opportunity_id: uuid.UUID,
    data: OpportunityUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    opp = await get_opportunity_or_404(db, opportunity_id)
    club = await require_club_owner(db, opp.club_id, user)

    updates = data.model_dump(exclude_unset=True)
    start = updates.get("start_date", opp.start_date)
    end = updates.get("end_date", opp.end_date)
    if start and end and end < start:
        raise HTTPException(
            status_code=400, detail="end_date must not be before start_date"
        )

    for field, value in updates.items():
        setattr(opp, field, value)
    await db.commit()
    await db.refresh(opp)
    return opportunity_response(opp, club.name)


@router.patch("/{opportunity_id}/status", response_model=OpportunityResponse)
async def update_opportunity_status(
    opportunity_id: uuid.UUID,
    data: OpportunityStatusUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Mark an opportunity active, filled or cancelled."""
    opp = await get_opportunity_or_404(db, opportunity_id)
    club = await require_club_owner(db, opp.club_id, user)
    opp.status = data.status
    await db.commit()
    await db.refresh(opp)
    logger.info(f"Opportunity {opp.id} set to {data.status.value}")
    return opportunity_response(opp, club.name)


@router.delete("/{opportunity_id}", status_code=204)
async def delete_opportunity(
    opportunity_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    opp = await get_opportunity_or_404(db, opportunity_id)
    await require_club_owner(db, opp.club_id, user)
    await db.delete(opp)
    await db.commit()
