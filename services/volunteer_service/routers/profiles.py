"""Volunteer profile endpoints."""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.volunteer_service.models import VolunteerProfile
from services.volunteer_service.schemas import (
    VisibilityUpdate,
    VolunteerCountResponse,
    VolunteerListResponse,
    VolunteerProfileCreate,
    VolunteerProfileResponse,
    VolunteerProfileUpdate,
)
from services.volunteer_service.search import VolunteerSearch, get_volunteer_search
from services.volunteer_service.services import (
    get_profile_by_user,
    require_own_profile,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


def _has_any(values: Optional[list], wanted: set[str]) -> bool:
    return bool(wanted & {v.lower() for v in values or []})


# ── Own profile ─────────────────────────────────────────────────────


@router.get("/profile/me", response_model=VolunteerProfileResponse)
async def get_my_profile(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    return await require_own_profile(db, user)


@router.post("/profile/me", response_model=VolunteerProfileResponse, status_code=201)
async def create_my_profile(
    data: VolunteerProfileCreate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    db: AsyncSession = Depends(get_async_db),
):
    """Create the caller's volunteer profile. One per user."""
    if await get_profile_by_user(db, user.user_id):
        raise HTTPException(status_code=409, detail="Volunteer profile already exists")

    email = data.email or user.email
    if not email:
        raise HTTPException(status_code=400, detail="An email address is required")

    profile = VolunteerProfile(
        user_id=user.user_id, **data.model_dump(exclude={"email"}), email=email
    )
    db.add(profile)
    await db.commit()
    search.invalidate()
    await db.refresh(profile)
    logger.info(f"Created volunteer profile {profile.id} for user {user.user_id}")
    return profile


@router.patch("/profile/me", response_model=VolunteerProfileResponse)
async def update_my_profile(
    data: VolunteerProfileUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    db: AsyncSession = Depends(get_async_db),
):
    profile = await require_own_profile(db, user)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    await db.commit()
    search.invalidate()
    await db.refresh(profile)
    return profile


@router.patch("/profile/me/visibility", response_model=VolunteerProfileResponse)
async def update_my_visibility(
    data: VisibilityUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    db: AsyncSession = Depends(get_async_db),
):
    """Hide or show the caller's profile in listings and search."""
    profile = await require_own_profile(db, user)
    profile.is_visible = data.is_visible
    await db.commit()
    search.invalidate()
    await db.refresh(profile)
    return profile


@router.delete("/profile/me", status_code=204)
async def delete_my_profile(
    user: Annotated[AuthUser, Depends(get_current_user)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    db: AsyncSession = Depends(get_async_db),
):
    profile = await require_own_profile(db, user)
    await db.delete(profile)
    await db.commit()
    search.invalidate()
    logger.info(f"Deleted volunteer profile for user {user.user_id}")


# ── Browsing ────────────────────────────────────────────────────────


@router.get("", response_model=VolunteerListResponse)
async def list_volunteers(
    location: Optional[str] = None,
    skills: Optional[list[str]] = Query(None),
    availability: Optional[list[str]] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """List visible volunteers. Skill and availability filters match any value."""
    query = select(VolunteerProfile).where(VolunteerProfile.is_visible.is_(True))
    if location:
        query = query.where(VolunteerProfile.location.ilike(f"%{location}%"))
    rows = (
        await db.execute(query.order_by(VolunteerProfile.created_at.desc()))
    ).scalars().all()

    if skills:
        wanted = {s.lower() for s in skills}
        rows = [p for p in rows if _has_any(p.skills, wanted)]
    if availability:
        wanted = {a.lower() for a in availability}
        rows = [p for p in rows if _has_any(p.availability, wanted)]

    return VolunteerListResponse(
        volunteers=rows[skip : skip + limit], total=len(rows), skip=skip, limit=limit
    )


@router.get("/count", response_model=VolunteerCountResponse)
async def count_volunteers(db: AsyncSession = Depends(get_async_db)):
    count = await db.scalar(
        select(func.count(VolunteerProfile.id)).where(
            VolunteerProfile.is_visible.is_(True)
        )
    )
    return VolunteerCountResponse(count=count or 0)


@router.get("/{volunteer_id}", response_model=VolunteerProfileResponse)
async def get_volunteer(
    volunteer_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Visible profiles are public to signed-in users; hidden ones only to owner/admin."""
    profile = (
        await db.execute(select(VolunteerProfile).where(VolunteerProfile.id == volunteer_id))
    ).scalar_one_or_none()
    if (
        not profile
        or not profile.is_visible
        and not (user.is_admin or profile.user_id == user.user_id)
    ):
        raise HTTPException(status_code=404, detail="Volunteer not found")
    return profile
