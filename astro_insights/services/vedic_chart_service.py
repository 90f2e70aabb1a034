import asyncio
import logging
from typing import Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from astro_insights.ai.llm_client import LLMClient
from astro_insights.ai.prompt_templates.vedic_chart import (
    build_dashas_prompt,
    build_vedic_chart_prompt,
    build_yogas_doshas_prompt,
)
from astro_insights.ai.response_parser import extract_json
from astro_insights.config import Settings, settings as default_settings
from astro_insights.data.mock_data import MOCK_DASHAS, MOCK_DOSHAS, MOCK_YOGAS, PARTIAL_SAMPLE_ADVISORY
from astro_insights.domain.converters import chart_to_birth_chart
from astro_insights.domain.errors import AstroInsightsError, AuthError, ResponseParseError
from astro_insights.domain.schemas import BirthInput, ChartData
from astro_insights.domain.vedic_schemas import BirthChart, Dashas, VedicChart, YogasDoshas

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class VedicChartBuilder:
    """
    Builds the dashboard's VedicChart from chart data.

    Tries one consolidated LLM request first. If that fails, the birth
    chart is built directly from ChartData and dashas and yogas/doshas
    are requested separately, each falling back to sample data.
    """

    def __init__(self, *, llm: LLMClient, cfg: Optional[Settings] = None):
        cfg = cfg or default_settings
        self.llm = llm
        self.max_tokens = cfg.VEDIC_CHART_MAX_TOKENS
        self.temperature = cfg.VEDIC_CHART_TEMPERATURE

    async def build(self, birth: BirthInput, chart: ChartData) -> VedicChart:
        if not self.llm.configured:
            raise AuthError("LLM API key is not configured")

        try:
            vedic = await self._request_model(build_vedic_chart_prompt(birth, chart), VedicChart)
        except AstroInsightsError as exc:
            logger.warning(f"Consolidated Vedic chart request failed ({exc}); building from components")
            return await self._build_from_components(birth, chart)

        expected_ascendant = chart_to_birth_chart(chart).ascendant
        if vedic.birth_chart.ascendant != expected_ascendant:
            logger.warning(
                f"LLM chart ascendant {vedic.birth_chart.ascendant} disagrees with "
                f"provider ascendant {expected_ascendant}; using provider chart"
            )
            vedic.birth_chart = _deterministic_birth_chart(chart)

        vedic.is_sample = False
        vedic.advisory = None
        return vedic

    # ─────────────────────────────────────────────
    # Component fallback
    # ─────────────────────────────────────────────

    async def _build_from_components(self, birth: BirthInput, chart: ChartData) -> VedicChart:
        (dashas, dashas_live), (yogas_doshas, yogas_live) = await asyncio.gather(
            self._component(
                build_dashas_prompt(birth, chart),
                Dashas,
                lambda: MOCK_DASHAS.model_copy(deep=True),
                "dashas",
            ),
            self._component(
                build_yogas_doshas_prompt(birth, chart),
                YogasDoshas,
                lambda: YogasDoshas(
                    yogas=[y.model_copy(deep=True) for y in MOCK_YOGAS],
                    doshas=[d.model_copy(deep=True) for d in MOCK_DOSHAS],
                ),
                "yogas/doshas",
            ),
        )

        return VedicChart(
            birth_chart=_deterministic_birth_chart(chart),
            dashas=dashas,
            yogas=yogas_doshas.yogas,
            doshas=yogas_doshas.doshas,
            is_sample=False,
            advisory=None if (dashas_live and yogas_live) else PARTIAL_SAMPLE_ADVISORY,
        )

    async def _component(
        self,
        prompt: Dict[str, str],
        model: Type[M],
        fallback: Callable[[], M],
        label: str,
    ) -> tuple[M, bool]:
        try:
            return await self._request_model(prompt, model), True
        except AstroInsightsError as exc:
            logger.warning(f"Vedic {label} request failed ({exc}); using sample {label}")
            return fallback(), False

    async def _request_model(self, prompt: Dict[str, str], model: Type[M]) -> M:
        completion = await self.llm.complete(
            system_prompt=prompt["system"],
            user_prompt=prompt["user"],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        data = extract_json(completion.content)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ResponseParseError(f"LLM JSON does not match {model.__name__}: {exc.error_count()} errors") from exc


def _deterministic_birth_chart(chart: ChartData) -> BirthChart:
    nakshatra = chart.kundli.nakshatra if chart.kundli else None
    return chart_to_birth_chart(chart, moon_nakshatra=nakshatra)
