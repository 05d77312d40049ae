"""FastAPI application for the Messaging Service."""

from fastapi import FastAPI
from libs.common.middleware import add_observability_middleware
from services.messaging_service.routers import messages_router


def create_app() -> FastAPI:
    """Create and configure the Messaging Service FastAPI app."""
    app = FastAPI(
        title="Club Volunteers Messaging Service",
        version="0.1.0",
        description="Direct messages between volunteers and club contacts.",
    )
    add_observability_middleware(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "messaging"}

    app.include_router(messages_router)

    return app


app = create_app()
