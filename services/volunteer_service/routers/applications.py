"""Volunteer application endpoints."""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.volunteer_service.models import (
    ApplicationStatus,
    OpportunityStatus,
    VolunteerApplication,
    VolunteerOpportunity,
)
from services.volunteer_service.schemas import (
    ApplicationCreate,
    ApplicationDetailResponse,
    ApplicationResponse,
    ApplicationStats,
    ApplicationStatusUpdate,
    HasAppliedResponse,
)
from services.volunteer_service.services import (
    application_details,
    application_stats,
    get_application_or_404,
    get_opportunity_or_404,
    get_profile_by_user,
    require_club_owner,
    require_own_profile,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])

WITHDRAWABLE = {ApplicationStatus.PENDING, ApplicationStatus.ACCEPTED}


# ── Volunteer side ──────────────────────────────────────────────────


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply(
    data: ApplicationCreate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Apply to an active opportunity. One application per volunteer and opportunity."""
    profile = await require_own_profile(db, user)
    opp = await get_opportunity_or_404(db, data.opportunity_id)
    if opp.status != OpportunityStatus.ACTIVE:
        raise HTTPException(
            status_code=400, detail="Opportunity is not accepting applications"
        )

    existing = (
        await db.execute(
            select(VolunteerApplication).where(
                VolunteerApplication.opportunity_id == opp.id,
                VolunteerApplication.volunteer_id == profile.id,
            )
        )
    ).scalar_one_or_none()
    if existing and existing.status != ApplicationStatus.WITHDRAWN:
        raise HTTPException(
            status_code=409, detail="You have already applied to this opportunity"
        )

    if existing:
        # Re-applying after a withdrawal reuses the row
        existing.status = ApplicationStatus.PENDING
        existing.message = data.message
        existing.applied_at = utc_now()
        application = existing
    else:
        application = VolunteerApplication(
            opportunity_id=opp.id,
            volunteer_id=profile.id,
            message=data.message,
            status=ApplicationStatus.PENDING,
        )
        db.add(application)
    await db.commit()
    await db.refresh(application)
    logger.info(f"Volunteer {profile.id} applied to opportunity {opp.id}")
    return application


@router.get("/me", response_model=list[ApplicationDetailResponse])
async def my_applications(
    user: Annotated[AuthUser, Depends(get_current_user)],
    status: Optional[ApplicationStatus] = None,
    db: AsyncSession = Depends(get_async_db),
):
    profile = await get_profile_by_user(db, user.user_id)
    if not profile:
        return []
    query = select(VolunteerApplication).where(
        VolunteerApplication.volunteer_id == profile.id
    )
    if status:
        query = query.where(VolunteerApplication.status == status)
    rows = await db.execute(query.order_by(VolunteerApplication.applied_at.desc()))
    return await application_details(db, list(rows.scalars()))


@router.get("/me/stats", response_model=ApplicationStats)
async def my_application_stats(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    profile = await get_profile_by_user(db, user.user_id)
    if not profile:
        return ApplicationStats()
    return await application_stats(db, VolunteerApplication.volunteer_id == profile.id)


@router.get("/has-applied/{opportunity_id}", response_model=HasAppliedResponse)
async def has_applied(
    opportunity_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Whether the caller holds a live (not withdrawn) application."""
    profile = await get_profile_by_user(db, user.user_id)
    if not profile:
        return HasAppliedResponse(has_applied=False)
    application = (
        await db.execute(
            select(VolunteerApplication).where(
                VolunteerApplication.opportunity_id == opportunity_id,
                VolunteerApplication.volunteer_id == profile.id,
                VolunteerApplication.status != ApplicationStatus.WITHDRAWN,
            )
        )
    ).scalar_one_or_none()
    if not application:
        return HasAppliedResponse(has_applied=False)
    return HasAppliedResponse(
        has_applied=True, application_id=application.id, status=application.status
    )


@router.post("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    profile = await require_own_profile(db, user)
    application = await get_application_or_404(db, application_id)
    if application.volunteer_id != profile.id:
        raise HTTPException(status_code=404, detail="Application not found")
    if application.status not in WITHDRAWABLE:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot withdraw a {application.status.value} application",
        )
    application.status = ApplicationStatus.WITHDRAWN
    await db.commit()
    await db.refresh(application)
    return application


# ── Club side ───────────────────────────────────────────────────────


@router.get(
    "/opportunity/{opportunity_id}", response_model=list[ApplicationDetailResponse]
)
async def applications_for_opportunity(
    opportunity_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    status: Optional[ApplicationStatus] = None,
    db: AsyncSession = Depends(get_async_db),
):
    opp = await get_opportunity_or_404(db, opportunity_id)
    await require_club_owner(db, opp.club_id, user)
    query = select(VolunteerApplication).where(
        VolunteerApplication.opportunity_id == opp.id
    )
    if status:
        query = query.where(VolunteerApplication.status == status)
    rows = await db.execute(query.order_by(VolunteerApplication.applied_at.asc()))
    return await application_details(db, list(rows.scalars()))


@router.get("/club/{club_id}", response_model=list[ApplicationDetailResponse])
async def applications_for_club(
    club_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    status: Optional[ApplicationStatus] = None,
    db: AsyncSession = Depends(get_async_db),
):
    await require_club_owner(db, club_id, user)
    query = (
        select(VolunteerApplication)
        .join(VolunteerOpportunity)
        .where(VolunteerOpportunity.club_id == club_id)
    )
    if status:
        query = query.where(VolunteerApplication.status == status)
    rows = await db.execute(query.order_by(VolunteerApplication.applied_at.desc()))
    return await application_details(db, list(rows.scalars()))


@router.get("/club/{club_id}/stats", response_model=ApplicationStats)
async def club_application_stats(
    club_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    await require_club_owner(db, club_id, user)
    opportunity_ids = select(VolunteerOpportunity.id).where(
        VolunteerOpportunity.club_id == club_id
    )
    return await application_stats(
        db, VolunteerApplication.opportunity_id.in_(opportunity_ids)
    )


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def review_application(
    application_id: uuid.UUID,
    data: ApplicationStatusUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Accept or reject a pending application."""
    application = await get_application_or_404(db, application_id)
    opp = await get_opportunity_or_404(db, application.opportunity_id)
    await require_club_owner(db, opp.club_id, user)
    if application.status != ApplicationStatus.PENDING:
        raise HTTPException(
            status_code=400, detail="Only pending applications can be reviewed"
        )
    application.status = data.status
    await db.commit()
    await db.refresh(application)
    logger.info(f"Application {application.id} {data.status.value}")
    return application
