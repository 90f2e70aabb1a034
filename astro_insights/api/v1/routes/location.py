import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query

from astro_insights.api.dependencies import get_astrology_service
from astro_insights.domain.errors import AstroInsightsError
from astro_insights.services.astrology_service import AstrologyService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/locations/search",
    response_model=List[Dict[str, Any]],
    summary="Search for places and get their coordinates",
)
async def search_locations(
    q: str = Query(..., min_length=2, description="Place name to search for (e.g. 'morena', 'new delhi')"),
    limit: int = Query(10, ge=1, le=25),
    service: AstrologyService = Depends(get_astrology_service),
):
    """
    Place autocomplete for the birth-data form.

    Returns matching places with display name, latitude and longitude.
    """
    try:
        return await service.locations.search_places(q, limit=limit)
    except AstroInsightsError as e:
        logger.error(f"Location search failed for '{q}': {e}")
        raise HTTPException(status_code=502, detail=f"Location search is unavailable: {e}")
