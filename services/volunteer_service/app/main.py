"""FastAPI application for the Volunteer Service."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from libs.common.middleware import add_observability_middleware
from libs.db.session import get_session_factory
from services.volunteer_service.routers import (
    admin_router,
    applications_router,
    opportunities_router,
    profiles_router,
    search_router,
)
from services.volunteer_service.search import build_volunteer_search
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    # Cancel pending debounce timers and drop cached results
    app.state.volunteer_search.dispose()


def create_app(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> FastAPI:
    """Create and configure the Volunteer Service FastAPI app."""
    app = FastAPI(
        title="Club Volunteers Volunteer Service",
        version="0.1.0",
        description="Volunteer profiles, search, opportunities and applications.",
        lifespan=lifespan,
    )
    add_observability_middleware(app)
    app.state.volunteer_search = build_volunteer_search(
        session_factory or get_session_factory()
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "volunteer"}

    # Search routes precede /volunteers/{volunteer_id}
    app.include_router(search_router)
    app.include_router(profiles_router)
    app.include_router(opportunities_router)
    app.include_router(applications_router)
    app.include_router(admin_router)

    return app


app = create_app()
