"""Messaging Service models package."""

from services.messaging_service.models.core import Message  # noqa: F401

__all__ = ["Message"]
