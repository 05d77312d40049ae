"""Club application approval workflow."""

import uuid
from typing import Optional

from fastapi import HTTPException
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.clubs_service.models import (
    ApplicationStatus,
    Club,
    ClubApplicationHistory,
)
from services.clubs_service.schemas import BulkOperationItem, BulkOperationResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def get_club_or_404(db: AsyncSession, club_id: uuid.UUID) -> Club:
    club = (
        await db.execute(select(Club).where(Club.id == club_id))
    ).scalar_one_or_none()
    if not club:
        raise HTTPException(status_code=404, detail="Club not found")
    return club


def record_history(
    db: AsyncSession,
    club: Club,
    action: ApplicationStatus,
    admin_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> ClubApplicationHistory:
    entry = ClubApplicationHistory(
        club_id=club.id, admin_id=admin_id, action=action, notes=notes
    )
    db.add(entry)
    return entry


def _review(
    db: AsyncSession,
    club: Club,
    admin: AuthUser,
    status: ApplicationStatus,
    notes: Optional[str],
) -> Club:
    if club.application_status == status:
        raise HTTPException(
            status_code=409,
            detail=f"Club application is already {status.value}",
        )
    club.application_status = status
    club.admin_notes = notes
    club.reviewed_by = admin.user_id
    club.reviewed_at = utc_now()
    club.verified = status == ApplicationStatus.APPROVED
    record_history(db, club, status, admin_id=admin.user_id, notes=notes)
    logger.info(f"Club {club.id} {status.value} by {admin.user_id}")
    return club


def approve_club(
    db: AsyncSession, club: Club, admin: AuthUser, notes: Optional[str] = None
) -> Club:
    """Mark a club approved. Caller commits."""
    return _review(db, club, admin, ApplicationStatus.APPROVED, notes)


def reject_club(db: AsyncSession, club: Club, admin: AuthUser, reason: str) -> Club:
    """Mark a club rejected; a non-blank reason is mandatory. Caller commits."""
    if not reason or not reason.strip():
        raise HTTPException(status_code=400, detail="Rejection reason is required")
    return _review(db, club, admin, ApplicationStatus.REJECTED, reason.strip())


async def bulk_review(
    db: AsyncSession,
    club_ids: list[uuid.UUID],
    admin: AuthUser,
    status: ApplicationStatus,
    notes: Optional[str] = None,
) -> BulkOperationResponse:
    """Apply one decision to many clubs, collecting a result per id."""
    rows = (await db.execute(select(Club).where(Club.id.in_(club_ids)))).scalars()
    clubs = {club.id: club for club in rows}

    results = []
    for club_id in dict.fromkeys(club_ids):
        club = clubs.get(club_id)
        if club is None:
            results.append(
                BulkOperationItem(club_id=club_id, success=False, error="Club not found")
            )
            continue
        try:
            if status == ApplicationStatus.APPROVED:
                approve_club(db, club, admin, notes)
            else:
                reject_club(db, club, admin, notes or "")
        except HTTPException as exc:
            results.append(
                BulkOperationItem(club_id=club_id, success=False, error=exc.detail)
            )
            continue
        results.append(BulkOperationItem(club_id=club_id, success=True))

    succeeded = sum(1 for item in results if item.success)
    return BulkOperationResponse(
        action="approve" if status == ApplicationStatus.APPROVED else "reject",
        succeeded=succeeded,
        failed=len(results) - succeeded,
        results=results,
    )
