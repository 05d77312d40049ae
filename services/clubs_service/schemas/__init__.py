"""Clubs Service schemas package.

Re-exports all schemas so routers import from one place.
"""

from services.clubs_service.schemas.audit import (  # noqa: F401
    AdminActivityLogEntry,
    AdminActivityLogListResponse,
    AdminPerformanceMetrics,
    ApplicationStatistics,
    ExportRequest,
    LocationCount,
    LogActionRequest,
    MonthlyAdminActivity,
    MonthlyApplications,
    ReasonCount,
)
from services.clubs_service.schemas.club import (  # noqa: F401
    MAX_BULK_IDS,
    ApplicationHistoryEntry,
    ApproveClubRequest,
    BulkApproveRequest,
    BulkOperationItem,
    BulkOperationResponse,
    BulkRejectRequest,
    ClubAdminResponse,
    ClubApplicationListResponse,
    ClubCreate,
    ClubListResponse,
    ClubResponse,
    ClubUpdate,
    RejectClubRequest,
)

__all__ = [
    "AdminActivityLogEntry",
    "AdminActivityLogListResponse",
    "AdminPerformanceMetrics",
    "ApplicationHistoryEntry",
    "ApplicationStatistics",
    "ApproveClubRequest",
    "BulkApproveRequest",
    "BulkOperationItem",
    "BulkOperationResponse",
    "BulkRejectRequest",
    "ClubAdminResponse",
    "ClubApplicationListResponse",
    "ClubCreate",
    "ClubListResponse",
    "ClubResponse",
    "ClubUpdate",
    "ExportRequest",
    "LocationCount",
    "LogActionRequest",
    "MAX_BULK_IDS",
    "MonthlyAdminActivity",
    "MonthlyApplications",
    "ReasonCount",
    "RejectClubRequest",
]
