"""Audit trail and reporting schemas."""

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from libs.common.sanitization import SanitizedStr
from pydantic import BaseModel, ConfigDict, Field
from services.clubs_service.models import (
    AdminActionType,
    AdminTargetType,
    ApplicationStatus,
)


class LogActionRequest(BaseModel):
    action_type: AdminActionType
    target_type: AdminTargetType
    target_id: Optional[str] = None
    target_name: Optional[SanitizedStr] = Field(None, max_length=200)
    details: Optional[SanitizedStr] = Field(None, max_length=4000)


class AdminActivityLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    admin_id: str
    admin_email: Optional[str] = None
    action_type: AdminActionType
    target_type: AdminTargetType
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class AdminActivityLogListResponse(BaseModel):
    entries: list[AdminActivityLogEntry]
    total: int
    skip: int
    limit: int


class MonthlyApplications(BaseModel):
    month: str
    total: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0


class LocationCount(BaseModel):
    location: str
    count: int


class ReasonCount(BaseModel):
    reason: str
    count: int


class ApplicationStatistics(BaseModel):
    total_applications: int
    pending_applications: int
    approved_applications: int
    rejected_applications: int
    approval_rate: float
    average_processing_time_hours: float
    applications_by_month: list[MonthlyApplications]
    applications_by_location: list[LocationCount]
    top_rejection_reasons: list[ReasonCount]


class MonthlyAdminActivity(BaseModel):
    month: str
    approvals: int = 0
    rejections: int = 0
    bulk_operations: int = 0


class AdminPerformanceMetrics(BaseModel):
    admin_id: str
    admin_email: Optional[str] = None
    total_actions: int
    approvals_count: int
    rejections_count: int
    bulk_operations_count: int
    average_processing_time_hours: float
    last_activity: Optional[datetime] = None
    activity_by_month: list[MonthlyAdminActivity]


class ExportRequest(BaseModel):
    format: Literal["csv", "json"] = "csv"
    include_history: bool = False
    include_admin_notes: bool = False
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    status_filter: Literal["pending", "approved", "rejected", "all"] = "all"

    def status(self) -> Optional[ApplicationStatus]:
        if self.status_filter == "all":
            return None
        return ApplicationStatus(self.status_filter)
