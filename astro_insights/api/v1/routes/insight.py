from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from astro_insights.api.dependencies import get_astrology_service
from astro_insights.domain.schemas import InsightResponse
from astro_insights.domain.vedic_schemas import VedicChart
from astro_insights.services.astrology_service import AstrologyService


router = APIRouter()


# ─────────────────────────────────────────────
# Request Schema
# ─────────────────────────────────────────────

class BirthRequest(BaseModel):
    """
    Raw form fields; normalisation and validation happen in the service
    so invalid input gets a success=False response instead of a 422.
    """
    date: str = Field(..., examples=["2000-06-15"])
    time: str = Field(..., examples=["10:15"])
    place: str = Field(..., examples=["Morena, Madhya Pradesh"])
    name: str = Field("", examples=["Test"])


class PreloadResponse(BaseModel):
    preloaded: bool


# ─────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────

@router.post(
    "/insight",
    response_model=InsightResponse,
    summary="Generate an astrology reading from birth details",
)
async def create_insight(
    payload: BirthRequest,
    service: AstrologyService = Depends(get_astrology_service),
):
    return await service.get_astrology_insight(payload.model_dump())


@router.post(
    "/vedic-chart",
    response_model=VedicChart,
    response_model_by_alias=True,
    summary="Vedic chart, dashas, yogas and doshas for the dashboard",
)
async def create_vedic_chart(
    payload: BirthRequest,
    service: AstrologyService = Depends(get_astrology_service),
):
    return await service.get_vedic_chart_data(payload.model_dump())


@router.post(
    "/preload",
    response_model=PreloadResponse,
    summary="Warm chart caches for the dashboard",
)
async def preload_chart(
    payload: BirthRequest,
    service: AstrologyService = Depends(get_astrology_service),
):
    preloaded = await service.preload_birth_chart_data(payload.model_dump())
    return {"preloaded": preloaded}


@router.delete(
    "/cache",
    summary="Start a new reading by clearing cached results",
)
async def clear_cache(
    service: AstrologyService = Depends(get_astrology_service),
):
    service.clear_cache()
    return {"status": "cleared"}
