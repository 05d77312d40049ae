"""Volunteer text search and suggestions."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.common.logging import get_logger
from services.volunteer_service.schemas import (
    SuggestionResponse,
    VolunteerSearchResponse,
)
from services.volunteer_service.search import VolunteerSearch, get_volunteer_search

logger = get_logger(__name__)

router = APIRouter(prefix="/volunteers/search", tags=["volunteer-search"])

SEARCH_UNAVAILABLE = "Search temporarily unavailable"


@router.get("", response_model=VolunteerSearchResponse)
async def search_volunteers(
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    q: str = Query(..., max_length=100),
):
    """Relevance-ranked search over names, bio, location and skills."""
    result = await search.profiles.search(q)
    if result.is_error:
        logger.warning(f"Volunteer search failed for {q!r}: {result.error}")
        raise HTTPException(status_code=503, detail=SEARCH_UNAVAILABLE)
    results = result.data or []
    return VolunteerSearchResponse(query=q, results=results, total=len(results))


@router.get("/suggestions", response_model=SuggestionResponse)
async def search_suggestions(
    search: Annotated[VolunteerSearch, Depends(get_volunteer_search)],
    q: str = Query(..., max_length=100),
):
    """Skill and location suggestions; queries under two characters return none."""
    try:
        suggestions = await search.suggestions.suggest(q)
    except Exception as exc:
        logger.warning(f"Suggestion lookup failed for {q!r}: {exc}")
        raise HTTPException(status_code=503, detail=SEARCH_UNAVAILABLE) from exc
    return SuggestionResponse(query=q, suggestions=suggestions)
