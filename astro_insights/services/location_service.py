import logging
from typing import Any, Dict, List, Optional

import httpx

from astro_insights.config import Settings, settings as default_settings
from astro_insights.domain.errors import FatalProviderError, NotFoundError, TransientError
from astro_insights.domain.schemas import Coordinates

logger = logging.getLogger(__name__)


class LocationService:
    """
    Geocoder adapter over the OpenStreetMap Nominatim search API.

    Nominatim answers a free-text query with an array of
    {lat, lon, display_name, ...}; the first result wins.
    """

    def __init__(
        self,
        *,
        cfg: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        cfg = cfg or default_settings
        self.api_url = cfg.GEOCODER_URL
        self.user_agent = cfg.GEOCODER_USER_AGENT
        self.timeout = cfg.GEOCODER_TIMEOUT
        self.transport = transport

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def resolve_place(self, name: str) -> Coordinates:
        """
        Resolve a place name to coordinates.

        Raises NotFoundError when the search has no results (a user-input
        problem, not retried) and TransientError on network/5xx failures.
        """
        results = await self._search(name, limit=1)
        if not results:
            logger.warning(f"Geocoder returned no results for place: {name}")
            raise NotFoundError(name)

        first = results[0]
        try:
            coordinates = Coordinates(
                latitude=float(first["lat"]),
                longitude=float(first["lon"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise FatalProviderError(f"Malformed geocoder result for '{name}': {exc}") from exc

        logger.info(
            f"Resolved '{name}' -> lat={coordinates.latitude}, lon={coordinates.longitude}"
        )
        return coordinates

    async def search_places(self, query: str, *, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Place autocomplete for the birth-data form.
        """
        if not query or len(query.strip()) < 2:
            return []

        results = await self._search(query, limit=limit)

        mapped_results = []
        for item in results:
            try:
                mapped_results.append({
                    "display_name": item.get("display_name") or query,
                    "latitude": float(item["lat"]),
                    "longitude": float(item["lon"]),
                })
            except (KeyError, TypeError, ValueError):
                continue

        return mapped_results

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _search(self, query: str, *, limit: int) -> List[Dict[str, Any]]:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    self.api_url,
                    params={
                        "q": query.strip(),
                        "format": "json",
                        "limit": limit,
                    },
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "application/json",
                        "Accept-Language": "en",
                    },
                    timeout=self.timeout,
                )
        except httpx.HTTPError as exc:
            raise TransientError(f"Geocoding service unreachable: {exc}") from exc

        if response.status_code >= 500 or response.status_code == 429:
            raise TransientError(
                f"Geocoding service error: {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise FatalProviderError(f"Geocoding request rejected: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise TransientError("Geocoding service returned invalid JSON") from exc

        if not isinstance(data, list):
            return []
        return data
