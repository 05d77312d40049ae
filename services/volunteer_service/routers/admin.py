"""Admin endpoints for the volunteer search cache."""

from typing import Annotated

from fastapi import APIRouter, Depends
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.common.search import SearchPerformance
from services.volunteer_service.schemas import (
    PrefetchRequest,
    PrefetchResponse,
    SearchMetricsOverview,
    SearchMetricsResponse,
)
from services.volunteer_service.search import VolunteerSearch, get_volunteer_search

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/volunteers/search", tags=["admin-volunteer-search"])


def _metrics(performance: SearchPerformance) -> SearchMetricsResponse:
    return SearchMetricsResponse(
        **performance.metrics.as_dict(), cache_size=performance.cache_size
    )


@router.get("/metrics", response_model=SearchMetricsOverview)
async def search_metrics(
    _admin: Annotated[AuthUser, Depends(require_admin)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
):
    return SearchMetricsOverview(
        profiles=_metrics(search.profiles),
        suggestions=_metrics(search.suggestions.performance),
    )


@router.delete("/cache", response_model=SearchMetricsOverview)
async def clear_search_cache(
    admin: Annotated[AuthUser, Depends(require_admin)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
):
    """Empty both caches and reset their metrics."""
    search.profiles.clear_cache()
    search.suggestions.performance.clear_cache()
    logger.info(f"Volunteer search cache cleared by {admin.user_id}")
    return SearchMetricsOverview(
        profiles=_metrics(search.profiles),
        suggestions=_metrics(search.suggestions.performance),
    )


@router.post("/prefetch", response_model=PrefetchResponse)
async def prefetch_searches(
    data: PrefetchRequest,
    _admin: Annotated[AuthUser, Depends(require_admin)],
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
):
    """Warm the profile cache for common queries. Failures are ignored."""
    queries = [q for q in dict.fromkeys(data.queries) if search.profiles.is_searchable(q)]
    for query in queries:
        await search.profiles.prefetch(query)
    return PrefetchResponse(prefetched=len(queries), cache_size=search.profiles.cache_size)
