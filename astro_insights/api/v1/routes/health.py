from fastapi import APIRouter

from astro_insights import __version__
from astro_insights.config import settings

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check():
    """
    Basic health check endpoint.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": __version__,
    }
