"""Clubs service routers."""

from services.clubs_service.routers.admin import router as admin_router
from services.clubs_service.routers.audit import router as audit_router
from services.clubs_service.routers.clubs import router as clubs_router

__all__ = [
    "admin_router",
    "audit_router",
    "clubs_router",
]
