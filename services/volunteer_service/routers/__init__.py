"""Volunteer service routers."""

from services.volunteer_service.routers.admin import router as admin_router
from services.volunteer_service.routers.applications import (
    router as applications_router,
)
from services.volunteer_service.routers.opportunities import (
    router as opportunities_router,
)
from services.volunteer_service.routers.profiles import router as profiles_router
from services.volunteer_service.routers.search import router as search_router

__all__ = [
    "admin_router",
    "applications_router",
    "opportunities_router",
    "profiles_router",
    "search_router",
]
