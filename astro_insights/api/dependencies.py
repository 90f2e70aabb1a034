from functools import lru_cache

from astro_insights.services.astrology_service import AstrologyService, build_astrology_service


@lru_cache
def get_astrology_service() -> AstrologyService:
    """
    Process-wide service instance.

    Tests replace it through `app.dependency_overrides`.
    """
    return build_astrology_service()
