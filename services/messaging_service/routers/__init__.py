"""Messaging service routers."""

from services.messaging_service.routers.messages import router as messages_router

__all__ = ["messages_router"]
