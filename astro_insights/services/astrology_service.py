import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from astro_insights.ai.llm_client import LLMClient
from astro_insights.ai.response_parser import parse_insight_sections
from astro_insights.cache.base import ResponseCache
from astro_insights.cache.keys import CacheKeys
from astro_insights.config import Settings, settings as default_settings
from astro_insights.data.mock_data import (
    MOCK_INSIGHT_ADVISORY,
    mock_chart_data,
    mock_insight,
    mock_vedic_chart,
)
from astro_insights.domain.errors import AstroInsightsError, AuthError, UserInputError
from astro_insights.domain.schemas import (
    BirthInput,
    ChartData,
    Insight,
    InsightPayload,
    InsightResponse,
    Provenance,
)
from astro_insights.domain.vedic_schemas import VedicChart
from astro_insights.services.chart_service import ChartFetcher
from astro_insights.services.insight_service import InsightGenerator
from astro_insights.services.location_service import LocationService
from astro_insights.services.provider_client import ProkeralaClient, ProviderConfig
from astro_insights.services.retry import RetryPolicy, retry_async
from astro_insights.services.token_manager import TokenManager
from astro_insights.services.vedic_chart_service import VedicChartBuilder

logger = logging.getLogger(__name__)

BirthLike = Union[BirthInput, Mapping[str, Any]]


class AstrologyService:
    """
    UI-facing orchestration service.

    Geocode -> token -> chart data -> LLM, with a sample-data fallback at
    every stage. Public methods never raise.
    """

    def __init__(
        self,
        *,
        locations: LocationService,
        token_manager: TokenManager,
        chart_fetcher: ChartFetcher,
        insight_generator: InsightGenerator,
        vedic_builder: VedicChartBuilder,
        cache: Optional[ResponseCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.locations = locations
        self.token_manager = token_manager
        self.chart_fetcher = chart_fetcher
        self.insight_generator = insight_generator
        self.vedic_builder = vedic_builder
        self.cache = cache if cache is not None else ResponseCache()
        self.retry_policy = retry_policy or RetryPolicy()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def get_astrology_insight(self, birth: BirthLike) -> InsightResponse:
        """
        Natural-language reading for a birth input.

        Invalid input returns success=False; every other failure returns
        the sample reading with an advisory.
        """
        try:
            birth = _coerce_birth(birth)
        except UserInputError as exc:
            logger.info(f"Rejected birth input: {exc}")
            return InsightResponse(success=False, error=str(exc))

        key = CacheKeys.insight(birth)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Insight cache hit: {key}")
            return _insight_response(cached)

        try:
            try:
                chart = await self.get_chart_data(birth)
            except AstroInsightsError as exc:
                logger.warning(f"Chart data unavailable ({type(exc).__name__}: {exc}); using sample chart")
                chart = mock_chart_data(birth)

            insight = await self.insight_generator.generate_insight(birth, chart)
        except Exception:
            logger.exception("Unexpected error while generating insight; returning sample insight")
            insight = mock_insight(birth)

        if insight.source is Provenance.LIVE:
            self.cache.set(key, insight)

        return _insight_response(insight)

    async def get_vedic_chart_data(self, birth: BirthLike) -> VedicChart:
        """
        Dashboard chart for a birth input, or the sample chart with an
        advisory when live data cannot be produced.
        """
        try:
            birth = _coerce_birth(birth)
            return await self._vedic_chart(birth)
        except AstroInsightsError as exc:
            logger.warning(f"Vedic chart unavailable ({type(exc).__name__}: {exc}); returning sample chart")
        except Exception:
            logger.exception("Unexpected error while building Vedic chart; returning sample chart")

        return mock_vedic_chart()

    async def preload_birth_chart_data(self, birth: BirthLike) -> bool:
        """
        Warm the chart and Vedic chart caches ahead of the dashboard.
        Returns True when live data was cached.
        """
        try:
            birth = _coerce_birth(birth)
            await self._vedic_chart(birth)
            return True
        except AstroInsightsError as exc:
            logger.warning(f"Preload failed ({type(exc).__name__}: {exc})")
        except Exception:
            logger.exception("Unexpected error during preload")
        return False

    def clear_cache(self) -> None:
        """
        The "new reading" action.
        """
        self.cache.clear()

    async def get_chart_data(self, birth: BirthInput) -> ChartData:
        """
        Cached chart data. Raises AstroInsightsError subclasses.
        """
        key = CacheKeys.chart(birth)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not self.token_manager.configured:
            raise AuthError("Provider credentials are not configured")

        coordinates = await retry_async(
            lambda: self.locations.resolve_place(birth.place),
            policy=self.retry_policy,
            description=f"Geocoding '{birth.place}'",
        )
        token = await self.token_manager.get_token()
        chart = await self.chart_fetcher.fetch_chart(birth, coordinates, token)

        self.cache.set(key, chart)
        logger.info(
            f"Chart data cached for {key}: ascendant={chart.ascendant.sign}, "
            f"sun={chart.sun.sign}, moon={chart.moon.sign}"
        )
        return chart

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _vedic_chart(self, birth: BirthInput) -> VedicChart:
        key = CacheKeys.vedic_chart(birth)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Vedic chart cache hit: {key}")
            return cached

        chart = await self.get_chart_data(birth)
        vedic = await self.vedic_builder.build(birth, chart)

        if not vedic.is_sample:
            self.cache.set(key, vedic)
        return vedic


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _coerce_birth(birth: BirthLike) -> BirthInput:
    if isinstance(birth, BirthInput):
        return birth
    if not isinstance(birth, Mapping):
        raise UserInputError("Birth details must be an object with date, time and place")
    return BirthInput.create(birth)


def _insight_response(insight: Insight) -> InsightResponse:
    return InsightResponse(
        success=True,
        data=InsightPayload(
            insight=insight.text,
            source=insight.source,
            sections=parse_insight_sections(insight.text),
            advisory=MOCK_INSIGHT_ADVISORY if insight.source is Provenance.MOCK else None,
        ),
    )


def build_astrology_service(
    cfg: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    llm: Optional[LLMClient] = None,
    cache: Optional[ResponseCache] = None,
) -> AstrologyService:
    """
    Wire the production service graph from settings.
    """
    cfg = cfg or default_settings
    retry_policy = RetryPolicy.from_settings(cfg)

    provider = ProkeralaClient.from_config(
        ProviderConfig.from_settings(cfg),
        retry_policy=retry_policy,
        transport=transport,
    )
    llm = llm or LLMClient(cfg=cfg, retry_policy=retry_policy)

    return AstrologyService(
        locations=LocationService(cfg=cfg, transport=transport),
        token_manager=provider.token_manager,
        chart_fetcher=ChartFetcher(provider),
        insight_generator=InsightGenerator(llm=llm, cfg=cfg),
        vedic_builder=VedicChartBuilder(llm=llm, cfg=cfg),
        cache=cache,
        retry_policy=retry_policy,
    )
