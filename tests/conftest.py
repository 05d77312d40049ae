import uuid
from contextlib import contextmanager
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db

MEMBER_EMAIL = "volunteer@example.com"


def make_user(
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    admin: bool = False,
) -> AuthUser:
    return AuthUser(
        user_id=user_id or f"user-{uuid.uuid4().hex[:8]}",
        email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
        role="service_role" if admin else "authenticated",
    )


def make_admin_user(**kwargs) -> AuthUser:
    return make_user(admin=True, **kwargs)


@contextmanager
def override_auth(app: FastAPI, user: AuthUser):
    """Temporarily authenticate requests to `app` as `user`."""
    previous = app.dependency_overrides.get(get_current_user)
    app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield user
    finally:
        if previous is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = previous


@pytest.fixture
def member_user() -> AuthUser:
    return make_user(user_id="member-1", email=MEMBER_EMAIL)


@contextmanager
def _wired(app: FastAPI, db_session, user: AuthUser):
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def clubs_client(db_session, member_user) -> AsyncGenerator[AsyncClient, None]:
    from services.clubs_service.app.main import app

    with _wired(app, db_session, member_user):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac


@pytest_asyncio.fixture
async def volunteer_search(session_factory):
    from services.volunteer_service.search import build_volunteer_search

    search = build_volunteer_search(session_factory)
    yield search
    search.dispose()


@pytest_asyncio.fixture
async def volunteer_client(
    db_session, member_user, volunteer_search
) -> AsyncGenerator[AsyncClient, None]:
    from services.volunteer_service.app.main import app
    from services.volunteer_service.search import get_volunteer_search

    with _wired(app, db_session, member_user):
        app.dependency_overrides[get_volunteer_search] = lambda: volunteer_search
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac


@pytest_asyncio.fixture
async def messaging_client(db_session, member_user) -> AsyncGenerator[AsyncClient, None]:
    from services.messaging_service.app.main import app

    with _wired(app, db_session, member_user):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records requested delays and returns at once."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
