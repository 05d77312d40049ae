"""Admin audit trail helpers."""

from typing import Optional

from fastapi import Request
from libs.auth.models import AuthUser
from services.clubs_service.models import (
    AdminActionType,
    AdminActivityLog,
    AdminTargetType,
)
from sqlalchemy.ext.asyncio import AsyncSession


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def record_admin_action(
    db: AsyncSession,
    admin: AuthUser,
    action_type: AdminActionType,
    target_type: AdminTargetType,
    *,
    target_id: Optional[str] = None,
    target_name: Optional[str] = None,
    details: Optional[str] = None,
    request: Optional[Request] = None,
) -> AdminActivityLog:
    """Stage an audit entry on the session. Caller commits."""
    entry = AdminActivityLog(
        admin_id=admin.user_id,
        admin_email=admin.email,
        action_type=action_type,
        target_type=target_type,
        target_id=target_id,
        target_name=target_name,
        details=details,
        ip_address=client_ip(request),
        user_agent=(request.headers.get("User-Agent") or "")[:500] if request else None,
    )
    db.add(entry)
    return entry
