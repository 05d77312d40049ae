"""Volunteer service Pydantic schemas."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.sanitization import PhoneStr, SanitizedList, SanitizedStr
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from services.volunteer_service.models.enums import (
    ApplicationStatus,
    OpportunityStatus,
)

# ============================================================================
# PROFILE SCHEMAS
# ============================================================================


class VolunteerProfileBase(BaseModel):
    first_name: SanitizedStr = Field(..., min_length=1, max_length=100)
    last_name: SanitizedStr = Field(..., min_length=1, max_length=100)
    phone: Optional[PhoneStr] = Field(None, max_length=32)
    location: Optional[SanitizedStr] = Field(None, max_length=200)
    bio: Optional[SanitizedStr] = Field(None, max_length=2000)
    skills: SanitizedList = Field(default_factory=list)
    availability: SanitizedList = Field(default_factory=list)
    profile_image_url: Optional[str] = Field(None, max_length=500)


class VolunteerProfileCreate(VolunteerProfileBase):
    email: Optional[EmailStr] = None
    is_visible: bool = True


class VolunteerProfileUpdate(BaseModel):
    first_name: Optional[SanitizedStr] = Field(None, min_length=1, max_length=100)
    last_name: Optional[SanitizedStr] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[PhoneStr] = Field(None, max_length=32)
    location: Optional[SanitizedStr] = Field(None, max_length=200)
    bio: Optional[SanitizedStr] = Field(None, max_length=2000)
    skills: Optional[SanitizedList] = None
    availability: Optional[SanitizedList] = None
    profile_image_url: Optional[str] = Field(None, max_length=500)


class VisibilityUpdate(BaseModel):
    is_visible: bool


class VolunteerProfileResponse(VolunteerProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    email: str
    is_visible: bool
    created_at: datetime
    updated_at: datetime


class VolunteerListResponse(BaseModel):
    volunteers: list[VolunteerProfileResponse]
    total: int
    skip: int
    limit: int


class VolunteerCountResponse(BaseModel):
    count: int


# ============================================================================
# SEARCH SCHEMAS
# ============================================================================


class VolunteerSearchResponse(BaseModel):
    query: str
    results: list[VolunteerProfileResponse]
    total: int


class SuggestionResponse(BaseModel):
    query: str
    suggestions: list[str]


class SearchMetricsResponse(BaseModel):
    search_count: int
    average_response_time: float
    cache_hit_rate: float
    last_search_time: float
    cache_size: int


class SearchMetricsOverview(BaseModel):
    profiles: SearchMetricsResponse
    suggestions: SearchMetricsResponse


class PrefetchRequest(BaseModel):
    queries: list[str] = Field(..., min_length=1, max_length=20)


class PrefetchResponse(BaseModel):
    prefetched: int
    cache_size: int


# ============================================================================
# OPPORTUNITY SCHEMAS
# ============================================================================


class OpportunityBase(BaseModel):
    title: SanitizedStr = Field(..., min_length=3, max_length=200)
    description: SanitizedStr = Field(..., min_length=1, max_length=5000)
    required_skills: SanitizedList = Field(default_factory=list)
    time_commitment: SanitizedStr = Field(..., min_length=1, max_length=200)
    location: Optional[SanitizedStr] = Field(None, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_recurring: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class OpportunityCreate(OpportunityBase):
    club_id: uuid.UUID


class OpportunityUpdate(BaseModel):
    title: Optional[SanitizedStr] = Field(None, min_length=3, max_length=200)
    description: Optional[SanitizedStr] = Field(None, min_length=1, max_length=5000)
    required_skills: Optional[SanitizedList] = None
    time_commitment: Optional[SanitizedStr] = Field(None, min_length=1, max_length=200)
    location: Optional[SanitizedStr] = Field(None, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_recurring: Optional[bool] = None


class OpportunityStatusUpdate(BaseModel):
    status: OpportunityStatus


class OpportunityResponse(OpportunityBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    club_id: uuid.UUID
    club_name: Optional[str] = None
    status: OpportunityStatus
    created_at: datetime
    updated_at: datetime


class OpportunityListResponse(BaseModel):
    opportunities: list[OpportunityResponse]
    total: int
    skip: int
    limit: int


# ============================================================================
# APPLICATION SCHEMAS
# ============================================================================


class ApplicationCreate(BaseModel):
    opportunity_id: uuid.UUID
    message: Optional[SanitizedStr] = Field(None, max_length=2000)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

    @model_validator(mode="after")
    def check_reviewable(self):
        if self.status not in (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED):
            raise ValueError("status must be 'accepted' or 'rejected'")
        return self


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    opportunity_id: uuid.UUID
    volunteer_id: uuid.UUID
    message: Optional[str] = None
    status: ApplicationStatus
    applied_at: datetime
    updated_at: datetime


class ApplicationDetailResponse(ApplicationResponse):
    opportunity_title: Optional[str] = None
    volunteer_name: Optional[str] = None
    volunteer_email: Optional[str] = None


class ApplicationStats(BaseModel):
    total: int = 0
    pending: int = 0
    accepted: int = 0
    rejected: int = 0
    withdrawn: int = 0


class HasAppliedResponse(BaseModel):
    has_applied: bool
    application_id: Optional[uuid.UUID] = None
    status: Optional[ApplicationStatus] = None
