"""Clubs Service business logic package."""

from services.clubs_service.services.approval import (
    approve_club,
    bulk_review,
    get_club_or_404,
    record_history,
    reject_club,
)
from services.clubs_service.services.audit import client_ip, record_admin_action
from services.clubs_service.services.reporting import (
    admin_performance,
    application_statistics,
    export_rows,
    rows_to_csv,
)

__all__ = [
    "admin_performance",
    "application_statistics",
    "approve_club",
    "bulk_review",
    "client_ip",
    "export_rows",
    "get_club_or_404",
    "record_admin_action",
    "record_history",
    "reject_club",
    "rows_to_csv",
]
