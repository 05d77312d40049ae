"""Club registration and owner-facing endpoints."""

import uuid
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.clubs_service.models import ApplicationStatus, Club, ClubApplicationHistory
from services.clubs_service.schemas import (
    ApplicationHistoryEntry,
    ClubAdminResponse,
    ClubCreate,
    ClubListResponse,
    ClubResponse,
    ClubUpdate,
)
from services.clubs_service.services import get_club_or_404, record_history
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/clubs", tags=["clubs"])


# ── Helpers ─────────────────────────────────────────────────────────


def _can_view(club: Club, user: AuthUser) -> bool:
    return (
        club.application_status == ApplicationStatus.APPROVED
        or user.is_admin
        or user.owns_email(club.contact_email)
    )


# ── Registration ────────────────────────────────────────────────────


@router.post("", response_model=ClubAdminResponse, status_code=201)
async def register_club(
    data: ClubCreate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Submit a club for approval. The contact email must be the caller's."""
    if not user.is_admin and not user.owns_email(data.contact_email):
        raise HTTPException(
            status_code=403,
            detail="Contact email must match your account email",
        )

    existing = (
        await db.execute(select(Club).where(Club.contact_email == data.contact_email))
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=409, detail="A club with this contact email already exists"
        )

    club = Club(**data.model_dump(), application_status=ApplicationStatus.PENDING)
    db.add(club)
    await db.flush()
    record_history(db, club, ApplicationStatus.PENDING, notes="Application submitted")
    await db.commit()
    await db.refresh(club)
    return club


# ── Browsing ────────────────────────────────────────────────────────


@router.get("", response_model=ClubListResponse)
async def list_clubs(
    location: Optional[str] = None,
    sport_type: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """List approved clubs (public)."""
    filters = [Club.application_status == ApplicationStatus.APPROVED]
    if location:
        filters.append(Club.location.ilike(f"%{location}%"))
    if search:
        filters.append(
            or_(Club.name.ilike(f"%{search}%"), Club.description.ilike(f"%{search}%"))
        )

    clubs = (
        await db.execute(select(Club).where(*filters).order_by(Club.name.asc()))
    ).scalars().all()
    if sport_type:
        wanted = sport_type.lower()
        clubs = [c for c in clubs if wanted in {s.lower() for s in c.sport_types or []}]

    return ClubListResponse(
        clubs=clubs[skip : skip + limit], total=len(clubs), skip=skip, limit=limit
    )


@router.get("/mine", response_model=list[ClubAdminResponse])
async def list_my_clubs(
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Clubs owned by the caller, whatever their status."""
    if not user.email:
        return []
    rows = await db.execute(
        select(Club)
        .where(func.lower(Club.contact_email) == user.email.lower())
        .order_by(Club.created_at.desc())
    )
    return rows.scalars().all()


@router.get("/{club_id}", response_model=ClubResponse)
async def get_club(
    club_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    club = await get_club_or_404(db, club_id)
    if not _can_view(club, user):
        raise HTTPException(status_code=404, detail="Club not found")
    return club


@router.patch("/{club_id}", response_model=ClubAdminResponse)
async def update_club(
    club_id: uuid.UUID,
    data: ClubUpdate,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Owners may edit until the club is approved; admins always."""
    club = await get_club_or_404(db, club_id)
    if not user.is_admin:
        if not user.owns_email(club.contact_email):
            raise HTTPException(status_code=404, detail="Club not found")
        if club.application_status == ApplicationStatus.APPROVED:
            raise HTTPException(
                status_code=403,
                detail="Approved clubs cannot be edited by their owners",
            )

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(club, field, value)
    await db.commit()
    await db.refresh(club)
    return club


@router.get("/{club_id}/history", response_model=list[ApplicationHistoryEntry])
async def get_club_history(
    club_id: uuid.UUID,
    user: Annotated[AuthUser, Depends(get_current_user)],
    db: AsyncSession = Depends(get_async_db),
):
    """Application history, visible to the owner and admins."""
    club = await get_club_or_404(db, club_id)
    if not user.is_admin and not user.owns_email(club.contact_email):
        raise HTTPException(status_code=404, detail="Club not found")
    rows = await db.execute(
        select(ClubApplicationHistory)
        .where(ClubApplicationHistory.club_id == club_id)
        .order_by(ClubApplicationHistory.created_at.asc())
    )
    return rows.scalars().all()
