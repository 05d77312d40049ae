"""Admin audit trail, reporting and export endpoints."""

import json
from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.db.session import get_async_db
from services.clubs_service.models import (
    AdminActionType,
    AdminActivityLog,
    AdminTargetType,
)
from services.clubs_service.schemas import (
    AdminActivityLogEntry,
    AdminActivityLogListResponse,
    AdminPerformanceMetrics,
    ApplicationStatistics,
    ExportRequest,
    LogActionRequest,
)
from services.clubs_service.services import (
    admin_performance,
    application_statistics,
    export_rows,
    record_admin_action,
    rows_to_csv,
)
from services.clubs_service.services.reporting import day_end, day_start
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin", tags=["admin-audit"])


# ── Audit trail ─────────────────────────────────────────────────────


@router.post("/audit/log-action", response_model=AdminActivityLogEntry, status_code=201)
async def log_action(
    body: LogActionRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    entry = record_admin_action(
        db,
        admin,
        body.action_type,
        body.target_type,
        target_id=body.target_id,
        target_name=body.target_name,
        details=body.details,
        request=request,
    )
    await db.commit()
    await db.refresh(entry)
    return entry


@router.get("/audit/activity-log", response_model=AdminActivityLogListResponse)
async def get_activity_log(
    admin: Annotated[AuthUser, Depends(require_admin)],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    admin_id: Optional[str] = None,
    action_type: Optional[AdminActionType] = None,
    target_type: Optional[AdminTargetType] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db),
):
    """Admin activity, newest first."""
    filters = []
    if date_from:
        filters.append(AdminActivityLog.created_at >= day_start(date_from))
    if date_to:
        filters.append(AdminActivityLog.created_at < day_end(date_to))
    if admin_id:
        filters.append(AdminActivityLog.admin_id == admin_id)
    if action_type:
        filters.append(AdminActivityLog.action_type == action_type)
    if target_type:
        filters.append(AdminActivityLog.target_type == target_type)

    total = (
        await db.execute(select(func.count(AdminActivityLog.id)).where(*filters))
    ).scalar() or 0
    rows = await db.execute(
        select(AdminActivityLog)
        .where(*filters)
        .order_by(desc(AdminActivityLog.created_at))
        .offset(skip)
        .limit(limit)
    )
    return AdminActivityLogListResponse(
        entries=rows.scalars().all(), total=total, skip=skip, limit=limit
    )


# ── Reports ─────────────────────────────────────────────────────────


@router.get("/reports/statistics", response_model=ApplicationStatistics)
async def get_statistics(
    admin: Annotated[AuthUser, Depends(require_admin)],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    admin_id: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    return await application_statistics(db, date_from, date_to, admin_id)


@router.get("/reports/admin-performance", response_model=list[AdminPerformanceMetrics])
async def get_admin_performance(
    admin: Annotated[AuthUser, Depends(require_admin)],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    admin_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db),
):
    return await admin_performance(db, date_from, date_to, admin_id, skip, limit)


# ── Export ──────────────────────────────────────────────────────────


@router.post("/export/applications")
async def export_applications(
    body: ExportRequest,
    request: Request,
    admin: Annotated[AuthUser, Depends(require_admin)],
    db: AsyncSession = Depends(get_async_db),
):
    """Download club applications as CSV or JSON."""
    rows = await export_rows(
        db,
        status=body.status(),
        date_from=body.date_from,
        date_to=body.date_to,
        include_history=body.include_history,
        include_admin_notes=body.include_admin_notes,
    )
    record_admin_action(
        db,
        admin,
        AdminActionType.EXPORT,
        AdminTargetType.CLUB_APPLICATION,
        details=f"{len(rows)} applications as {body.format} "
        f"(status={body.status_filter})",
        request=request,
    )
    await db.commit()

    filename = f"club-applications-{utc_now():%Y%m%d-%H%M%S}.{body.format}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if body.format == "json":
        return Response(
            content=json.dumps(rows, default=str),
            media_type="application/json",
            headers=headers,
        )
    return Response(
        content=rows_to_csv(rows, include_admin_notes=body.include_admin_notes),
        media_type="text/csv",
        headers=headers,
    )
