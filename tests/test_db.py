import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import inspect, text


@pytest.mark.asyncio
async def test_db_connection(db_session):
    """
    Test that we can connect to the DB and execute a query.
    """
    result = await db_session.execute(text("SELECT 1"))
    assert result.scalar() == 1


@pytest.mark.asyncio
async def test_schema_created(test_engine):
    async with test_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    for name in [
        "clubs",
        "club_application_history",
        "admin_activity_logs",
        "volunteer_profiles",
        "volunteer_opportunities",
        "volunteer_applications",
        "messages",
    ]:
        assert name in tables


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "module, service",
    [
        ("services.clubs_service.app.main", "clubs"),
        ("services.volunteer_service.app.main", "volunteer"),
        ("services.messaging_service.app.main", "messaging"),
    ],
)
async def test_health_endpoints(module, service):
    import importlib

    app = importlib.import_module(module).app
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": service}
    assert "X-Request-ID" in response.headers
    assert response.headers["Server-Timing"].startswith("app;dur=")
