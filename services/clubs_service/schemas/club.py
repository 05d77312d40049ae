"""Club registration and approval schemas."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from libs.common.sanitization import PhoneStr, SanitizedList, SanitizedStr
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from services.clubs_service.models import ApplicationStatus

MAX_BULK_IDS = 50


class ClubBase(BaseModel):
    name: SanitizedStr = Field(..., min_length=2, max_length=200)
    description: Optional[SanitizedStr] = None
    location: SanitizedStr = Field(..., min_length=2, max_length=200)
    contact_email: EmailStr
    contact_phone: Optional[PhoneStr] = Field(None, max_length=32)
    logo_url: Optional[str] = Field(None, max_length=500)
    website_url: Optional[str] = Field(None, max_length=500)
    sport_types: SanitizedList = Field(default_factory=list)

    @field_validator("contact_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ClubCreate(ClubBase):
    pass


class ClubUpdate(BaseModel):
    name: Optional[SanitizedStr] = Field(None, min_length=2, max_length=200)
    description: Optional[SanitizedStr] = None
    location: Optional[SanitizedStr] = Field(None, min_length=2, max_length=200)
    contact_phone: Optional[PhoneStr] = Field(None, max_length=32)
    logo_url: Optional[str] = Field(None, max_length=500)
    website_url: Optional[str] = Field(None, max_length=500)
    sport_types: Optional[SanitizedList] = None


class ClubResponse(ClubBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    verified: bool
    application_status: ApplicationStatus
    created_at: datetime
    updated_at: datetime


class ClubAdminResponse(ClubResponse):
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None


class ClubListResponse(BaseModel):
    clubs: list[ClubResponse]
    total: int
    skip: int
    limit: int


class ClubApplicationListResponse(BaseModel):
    applications: list[ClubAdminResponse]
    total: int
    skip: int
    limit: int


class ApplicationHistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    club_id: uuid.UUID
    admin_id: Optional[str] = None
    action: ApplicationStatus
    notes: Optional[str] = None
    created_at: datetime


# ============================================================================
# APPROVAL SCHEMAS
# ============================================================================


class ApproveClubRequest(BaseModel):
    admin_notes: Optional[SanitizedStr] = Field(None, max_length=2000)


class RejectClubRequest(BaseModel):
    rejection_reason: SanitizedStr = Field(..., max_length=2000)

    @field_validator("rejection_reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Rejection reason is required")
        return v


class BulkApproveRequest(BaseModel):
    club_ids: list[uuid.UUID] = Field(..., min_length=1, max_length=MAX_BULK_IDS)
    admin_notes: Optional[SanitizedStr] = Field(None, max_length=2000)


class BulkRejectRequest(BaseModel):
    club_ids: list[uuid.UUID] = Field(..., min_length=1, max_length=MAX_BULK_IDS)
    rejection_reason: SanitizedStr = Field(..., max_length=2000)

    @field_validator("rejection_reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Rejection reason is required")
        return v


class BulkOperationItem(BaseModel):
    club_id: uuid.UUID
    success: bool
    error: Optional[str] = None


class BulkOperationResponse(BaseModel):
    action: Literal["approve", "reject"]
    succeeded: int
    failed: int
    results: list[BulkOperationItem]
