"""Admin club application review endpoints."""

import uuid
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.clubs_service.models import (
    AdminActionType,
    AdminTargetType,
    ApplicationStatus,
    Club,
    ClubApplicationHistory,
)
from services.clubs_service.schemas import (
    ApplicationHistoryEntry,
    ApproveClubRequest,
    BulkApproveRequest,
    BulkOperationResponse,
    BulkRejectRequest,
    ClubAdminResponse,
    ClubApplicationListResponse,
    RejectClubRequest,
)
from services.clubs_service.services import (
    approve_club,
    bulk_review,
    get_club_or_404,
    record_admin_action,
    reject_club,
)
from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin/clubs", tags=["admin-clubs"])

SORT_COLUMNS = {
    "created_at": Club.created_at,
    "name": Club.name,
    "location": Club.location,
    "reviewed_at": Club.reviewed_at,
}


@router.get("/applications", response_model=ClubApplicationListResponse)
async def list_applications(
    admin: Annotated[AuthUser, Depends(require_admin)],
    status: Optional[ApplicationStatus] = None,
    search: Optional[str] = Query(None, max_length=100),
    sort_by: Literal["created_at", "name", "location", "reviewed_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Club applications with status filter, free-text search and paging."""
    filters = []
    if status:
        filters.append(Club.application_status == status)
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(
            or_(
                Club.name.ilike(pattern),
                Club.location.ilike(pattern),
                Club.contact_email.ilike(pattern),
                Club.description.ilike(pattern),
            )
        )

    order = desc if sort_order == "desc" else asc
    total = (
        await db.execute(select(func.count(Club.id)).where(*filters))
    ).scalar() or 0
    rows = await db.execute(
        select(Club)
        .where(*filters)
        .order_by(order(SORT_COLUMNS[sort_by]), Club.id)
        .offset(skip)
        .limit(limit)
    )
    return ClubApplicationListResponse(
        applications=rows.scalars().all(), total=total, skip=skip, limit=limit
    )


@router.get("/applications/{club_id}", response_model=ClubAdminResponse)
async def get_application(
    club_id: uuid.UUID,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    club = await get_club_or_404(db, club_id)
    record_admin_action(
        db,
        admin,
        AdminActionType.VIEW,
        AdminTargetType.CLUB_APPLICATION,
        target_id=str(club.id),
        target_name=club.name,
        request=request,
    )
    await db.commit()
    await db.refresh(club)
    return club


@router.get(
    "/applications/{club_id}/history", response_model=list[ApplicationHistoryEntry]
)
async def get_application_history(
    club_id: uuid.UUID,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    await get_club_or_404(db, club_id)
    rows = await db.execute(
        select(ClubApplicationHistory)
        .where(ClubApplicationHistory.club_id == club_id)
        .order_by(ClubApplicationHistory.created_at.asc())
    )
    return rows.scalars().all()


@router.post("/applications/{club_id}/approve", response_model=ClubAdminResponse)
async def approve_application(
    club_id: uuid.UUID,
    body: ApproveClubRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    club = await get_club_or_404(db, club_id)
    approve_club(db, club, admin, body.admin_notes)
    record_admin_action(
        db,
        admin,
        AdminActionType.APPROVE,
        AdminTargetType.CLUB_APPLICATION,
        target_id=str(club.id),
        target_name=club.name,
        details=body.admin_notes,
        request=request,
    )
    await db.commit()
    await db.refresh(club)
    return club


@router.post("/applications/{club_id}/reject", response_model=ClubAdminResponse)
async def reject_application(
    club_id: uuid.UUID,
    body: RejectClubRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    club = await get_club_or_404(db, club_id)
    reject_club(db, club, admin, body.rejection_reason)
    record_admin_action(
        db,
        admin,
        AdminActionType.REJECT,
        AdminTargetType.CLUB_APPLICATION,
        target_id=str(club.id),
        target_name=club.name,
        details=body.rejection_reason,
        request=request,
    )
    await db.commit()
    await db.refresh(club)
    return club


@router.post("/applications/bulk-approve", response_model=BulkOperationResponse)
async def bulk_approve(
    body: BulkApproveRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    result = await bulk_review(
        db, body.club_ids, admin, ApplicationStatus.APPROVED, body.admin_notes
    )
    record_admin_action(
        db,
        admin,
        AdminActionType.BULK_APPROVE,
        AdminTargetType.CLUB_APPLICATION,
        details=f"{result.succeeded} approved, {result.failed} failed",
        request=request,
    )
    await db.commit()
    return result


@router.post("/applications/bulk-reject", response_model=BulkOperationResponse)
async def bulk_reject(
    body: BulkRejectRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    result = await bulk_review(
        db, body.club_ids, admin, ApplicationStatus.REJECTED, body.rejection_reason
    )
    record_admin_action(
        db,
        admin,
        AdminActionType.BULK_REJECT,
        AdminTargetType.CLUB_APPLICATION,
        details=f"{result.succeeded} rejected, {result.failed} failed: "
        f"{body.rejection_reason}",
        request=request,
    )
    await db.commit()
    return result
