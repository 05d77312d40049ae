"""Messaging Service schemas package."""

from services.messaging_service.schemas.message import (  # noqa: F401
    BulkReadRequest,
    BulkReadResponse,
    ConversationSummary,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    UnreadCountResponse,
)
