"""Statistics, admin performance and export for club applications."""

import csv
import io
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from libs.common.datetime_utils import as_utc
from services.clubs_service.models import (
    AdminActionType,
    AdminActivityLog,
    ApplicationStatus,
    Club,
    ClubApplicationHistory,
)
from services.clubs_service.schemas import (
    AdminPerformanceMetrics,
    ApplicationStatistics,
    LocationCount,
    MonthlyAdminActivity,
    MonthlyApplications,
    ReasonCount,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

TOP_REASONS = 5
TOP_LOCATIONS = 10

EXPORT_FIELDS = [
    "id",
    "name",
    "location",
    "contact_email",
    "contact_phone",
    "sport_types",
    "application_status",
    "reviewed_by",
    "reviewed_at",
    "created_at",
]


def day_start(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def day_end(value: date) -> datetime:
    """Exclusive upper bound covering the whole of `value`."""
    return day_start(value) + timedelta(days=1)


def month_key(value: datetime) -> str:
    return as_utc(value).strftime("%Y-%m")


def processing_hours(created_at: datetime, reviewed_at: Optional[datetime]) -> Optional[float]:
    if reviewed_at is None:
        return None
    delta = as_utc(reviewed_at) - as_utc(created_at)
    return max(delta.total_seconds(), 0.0) / 3600


def _date_filters(column, date_from: Optional[date], date_to: Optional[date]) -> list:
    filters = []
    if date_from:
        filters.append(column >= day_start(date_from))
    if date_to:
        filters.append(column < day_end(date_to))
    return filters


async def application_statistics(
    db: AsyncSession,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    admin_id: Optional[str] = None,
) -> ApplicationStatistics:
    filters = _date_filters(Club.created_at, date_from, date_to)
    if admin_id:
        filters.append(Club.reviewed_by == admin_id)

    clubs = (await db.execute(select(Club).where(*filters))).scalars().all()

    by_status = Counter(club.application_status for club in clubs)
    total = len(clubs)
    approved = by_status[ApplicationStatus.APPROVED]
    rejected = by_status[ApplicationStatus.REJECTED]
    decided = approved + rejected

    hours = [
        h
        for h in (processing_hours(c.created_at, c.reviewed_at) for c in clubs)
        if h is not None
    ]

    months: dict[str, MonthlyApplications] = {}
    for club in clubs:
        key = month_key(club.created_at)
        bucket = months.setdefault(key, MonthlyApplications(month=key))
        bucket.total += 1
        setattr(
            bucket,
            club.application_status.value,
            getattr(bucket, club.application_status.value) + 1,
        )

    locations = Counter(club.location for club in clubs)

    reason_query = (
        select(ClubApplicationHistory.notes, func.count(ClubApplicationHistory.id))
        .where(
            ClubApplicationHistory.action == ApplicationStatus.REJECTED,
            ClubApplicationHistory.notes.is_not(None),
            *_date_filters(ClubApplicationHistory.created_at, date_from, date_to),
        )
        .group_by(ClubApplicationHistory.notes)
        .order_by(func.count(ClubApplicationHistory.id).desc())
        .limit(TOP_REASONS)
    )
    if admin_id:
        reason_query = reason_query.where(ClubApplicationHistory.admin_id == admin_id)
    reasons = (await db.execute(reason_query)).all()

    return ApplicationStatistics(
        total_applications=total,
        pending_applications=by_status[ApplicationStatus.PENDING],
        approved_applications=approved,
        rejected_applications=rejected,
        approval_rate=round(approved / decided * 100, 2) if decided else 0.0,
        average_processing_time_hours=round(sum(hours) / len(hours), 2) if hours else 0.0,
        applications_by_month=[months[key] for key in sorted(months)],
        applications_by_location=[
            LocationCount(location=location, count=count)
            for location, count in locations.most_common(TOP_LOCATIONS)
        ],
        top_rejection_reasons=[
            ReasonCount(reason=reason, count=count) for reason, count in reasons
        ],
    )


async def admin_performance(
    db: AsyncSession,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    admin_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 50,
) -> list[AdminPerformanceMetrics]:
    filters = _date_filters(AdminActivityLog.created_at, date_from, date_to)
    if admin_id:
        filters.append(AdminActivityLog.admin_id == admin_id)

    entries = (
        await db.execute(
            select(AdminActivityLog)
            .where(*filters)
            .order_by(AdminActivityLog.created_at.asc())
        )
    ).scalars().all()

    grouped: dict[str, list[AdminActivityLog]] = defaultdict(list)
    for entry in entries:
        grouped[entry.admin_id].append(entry)

    reviewed = (
        await db.execute(
            select(Club).where(
                Club.reviewed_by.in_(list(grouped)), Club.reviewed_at.is_not(None)
            )
        )
    ).scalars().all() if grouped else []
    hours_by_admin: dict[str, list[float]] = defaultdict(list)
    for club in reviewed:
        hours_by_admin[club.reviewed_by].append(
            processing_hours(club.created_at, club.reviewed_at)
        )

    bulk_types = {AdminActionType.BULK_APPROVE, AdminActionType.BULK_REJECT}
    metrics = []
    for admin, admin_entries in grouped.items():
        counts = Counter(entry.action_type for entry in admin_entries)
        months: dict[str, MonthlyAdminActivity] = {}
        for entry in admin_entries:
            key = month_key(entry.created_at)
            bucket = months.setdefault(key, MonthlyAdminActivity(month=key))
            if entry.action_type == AdminActionType.APPROVE:
                bucket.approvals += 1
            elif entry.action_type == AdminActionType.REJECT:
                bucket.rejections += 1
            elif entry.action_type in bulk_types:
                bucket.bulk_operations += 1

        hours = hours_by_admin.get(admin, [])
        metrics.append(
            AdminPerformanceMetrics(
                admin_id=admin,
                admin_email=admin_entries[-1].admin_email,
                total_actions=len(admin_entries),
                approvals_count=counts[AdminActionType.APPROVE],
                rejections_count=counts[AdminActionType.REJECT],
                bulk_operations_count=sum(counts[t] for t in bulk_types),
                average_processing_time_hours=(
                    round(sum(hours) / len(hours), 2) if hours else 0.0
                ),
                last_activity=admin_entries[-1].created_at,
                activity_by_month=[months[key] for key in sorted(months)],
            )
        )

    metrics.sort(key=lambda m: m.total_actions, reverse=True)
    return metrics[skip : skip + limit]


async def export_rows(
    db: AsyncSession,
    status: Optional[ApplicationStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    include_history: bool = False,
    include_admin_notes: bool = False,
) -> list[dict]:
    query = (
        select(Club)
        .where(*_date_filters(Club.created_at, date_from, date_to))
        .order_by(Club.created_at.asc())
    )
    if status:
        query = query.where(Club.application_status == status)
    if include_history:
        query = query.options(selectinload(Club.history))

    rows = []
    for club in (await db.execute(query)).scalars().all():
        row = {field: getattr(club, field) for field in EXPORT_FIELDS}
        row["id"] = str(club.id)
        row["application_status"] = club.application_status.value
        row["sport_types"] = ";".join(club.sport_types or [])
        row["reviewed_at"] = club.reviewed_at.isoformat() if club.reviewed_at else None
        row["created_at"] = club.created_at.isoformat()
        if include_admin_notes:
            row["admin_notes"] = club.admin_notes
        if include_history:
            row["history"] = [
                {
                    "action": entry.action.value,
                    "admin_id": entry.admin_id,
                    "notes": entry.notes,
                    "created_at": entry.created_at.isoformat(),
                }
                for entry in club.history
            ]
        rows.append(row)
    return rows


def rows_to_csv(rows: list[dict], include_admin_notes: bool = False) -> str:
    fields = list(EXPORT_FIELDS)
    if include_admin_notes:
        fields.append("admin_notes")
    if rows and "history" in rows[0]:
        fields.append("history")

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fields, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        if "history" in row:
            row = {
                **row,
                "history": " | ".join(
                    f"{h['created_at']} {h['action']}: {h['notes'] or ''}"
                    for h in row["history"]
                ),
            }
        writer.writerow(row)
    return buffer.getvalue()
