import os
from typing import AsyncGenerator

import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Load .env.test when present; otherwise run against in-memory SQLite
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402

# Import all models so metadata includes every table
from services.clubs_service import models as _club_models  # noqa: E402,F401
from services.messaging_service import models as _messaging_models  # noqa: E402,F401
from services.volunteer_service import models as _volunteer_models  # noqa: E402,F401

# Clear cached settings to reload with new env vars
get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh schema per test. SQLite in-memory databases live as long as their
    connection, so every session shares one connection through StaticPool.
    """
    if settings.is_sqlite:
        engine = create_async_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(settings.DATABASE_URL, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield the session that request handlers and test setup share."""
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
