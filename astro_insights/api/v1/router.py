from fastapi import APIRouter

from astro_insights.api.v1.routes.health import router as health_router
from astro_insights.api.v1.routes.insight import router as insight_router
from astro_insights.api.v1.routes.location import router as location_router

api_router = APIRouter()

# ─────────────────────────────────────────────
# Public Routes
# ─────────────────────────────────────────────

api_router.include_router(
    health_router,
    tags=["Health"],
)

api_router.include_router(
    location_router,
    tags=["Locations"],
)

api_router.include_router(
    insight_router,
    tags=["Insight"],
)
