"""FastAPI application for the Clubs Service."""

from fastapi import FastAPI
from libs.common.middleware import add_observability_middleware
from services.clubs_service.routers import admin_router, audit_router, clubs_router


def create_app() -> FastAPI:
    """Create and configure the Clubs Service FastAPI app."""
    app = FastAPI(
        title="Club Volunteers Clubs Service",
        version="0.1.0",
        description="Club registration, approval workflow, audit trail and reporting.",
    )
    add_observability_middleware(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "clubs"}

    app.include_router(clubs_router)
    app.include_router(admin_router)
    app.include_router(audit_router)

    return app


app = create_app()
