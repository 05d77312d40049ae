"""Messaging schemas."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.sanitization import SanitizedStr
from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    recipient_id: str = Field(..., min_length=1)
    subject: Optional[SanitizedStr] = Field(None, max_length=200)
    content: SanitizedStr = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sender_id: str
    recipient_id: str
    subject: Optional[str] = None
    content: str
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]
    total: int
    skip: int
    limit: int


class ConversationSummary(BaseModel):
    user_id: str
    last_message: MessageResponse
    unread_count: int


class BulkReadRequest(BaseModel):
    message_ids: list[uuid.UUID] = Field(..., min_length=1, max_length=100)


class BulkReadResponse(BaseModel):
    updated: int


class UnreadCountResponse(BaseModel):
    unread_count: int
