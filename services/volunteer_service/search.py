"""Volunteer profile search backed by SearchPerformance.

One VolunteerSearch lives on `app.state` for the lifetime of the app, so its
cache and metrics are shared by every request the process serves.
"""

from dataclasses import dataclass

from fastapi import Request
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.search import (
    SearchPerformance,
    SearchPerformanceOptions,
    SearchSuggestions,
)
from libs.common.search.utils import extract_search_keywords, rank_by_relevance
from services.volunteer_service.models import VolunteerProfile
from services.volunteer_service.schemas import VolunteerProfileResponse
from sqlalchemy import String, and_, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

RELEVANCE_WEIGHTS = {
    "first_name": 1.5,
    "last_name": 1.5,
    "bio": 1.0,
    "location": 0.5,
}
MAX_SUGGESTIONS = 10


async def find_profiles(db: AsyncSession, query: str) -> list[VolunteerProfileResponse]:
    """Visible profiles matching every keyword, most relevant first."""
    keywords = extract_search_keywords(query) or [query.strip().lower()]
    clauses = []
    for keyword in keywords:
        pattern = f"%{keyword}%"
        clauses.append(
            or_(
                VolunteerProfile.first_name.ilike(pattern),
                VolunteerProfile.last_name.ilike(pattern),
                VolunteerProfile.bio.ilike(pattern),
                VolunteerProfile.location.ilike(pattern),
                cast(VolunteerProfile.skills, String).ilike(pattern),
            )
        )
    rows = await db.execute(
        select(VolunteerProfile)
        .where(VolunteerProfile.is_visible.is_(True), and_(*clauses))
        .order_by(VolunteerProfile.created_at.desc())
    )
    ranked = rank_by_relevance(rows.scalars().all(), query, RELEVANCE_WEIGHTS)
    return [VolunteerProfileResponse.model_validate(p) for p in ranked]


async def find_suggestions(db: AsyncSession, query: str) -> list[str]:
    """Distinct skills and locations of visible profiles containing `query`."""
    needle = query.strip().lower()
    rows = await db.execute(
        select(VolunteerProfile.skills, VolunteerProfile.location).where(
            VolunteerProfile.is_visible.is_(True)
        )
    )
    seen: dict[str, str] = {}
    for skills, location in rows:
        for candidate in [*(skills or []), location]:
            if candidate and needle in candidate.lower():
                seen.setdefault(candidate.lower(), candidate)
    return sorted(seen.values(), key=str.lower)[:MAX_SUGGESTIONS]


@dataclass
class VolunteerSearch:
    profiles: SearchPerformance[list[VolunteerProfileResponse]]
    suggestions: SearchSuggestions

    def invalidate(self) -> None:
        """Forget cached results after a profile was created, changed or removed."""
        self.profiles.invalidate()
        self.suggestions.performance.invalidate()

    def dispose(self) -> None:
        self.profiles.dispose()
        self.suggestions.dispose()


def build_volunteer_search(
    session_factory: async_sessionmaker[AsyncSession],
) -> VolunteerSearch:
    """Wire profile search and suggestions to their own database sessions."""
    settings = get_settings()

    async def search_profiles(query: str) -> list[VolunteerProfileResponse]:
        async with session_factory() as session:
            return await find_profiles(session, query)

    async def suggest(query: str) -> list[str]:
        async with session_factory() as session:
            return await find_suggestions(session, query)

    profiles = SearchPerformance(
        search_profiles,
        SearchPerformanceOptions.from_settings(settings),
        name="volunteer-profiles",
    )
    suggestions = SearchSuggestions(
        suggest,
        SearchPerformanceOptions.from_settings(
            settings, debounce_ms=150, min_search_length=2
        ),
        name="volunteer-suggestions",
    )
    logger.info("Volunteer search initialised")
    return VolunteerSearch(profiles=profiles, suggestions=suggestions)


def get_volunteer_search(request: Request) -> VolunteerSearch:
    """FastAPI dependency returning the app-wide search instance."""
    return request.app.state.volunteer_search
