import asyncio
import logging
from typing import Dict, Optional

from astro_insights.ai.llm_client import LLMClient
from astro_insights.ai.prompt_templates.insight import (
    INSIGHT_SECTIONS,
    build_insight_prompt,
    build_simplified_prompt,
    build_structured_prompt,
)
from astro_insights.ai.truncation import Classifier, Completeness, classify_completion
from astro_insights.config import Settings, settings as default_settings
from astro_insights.data.mock_data import mock_insight
from astro_insights.domain.errors import AstroInsightsError, LLMTimeoutError, TransientError, TruncationError
from astro_insights.domain.schemas import BirthInput, ChartData, Insight, Provenance
from astro_insights.services.retry import RetryPolicy

logger = logging.getLogger(__name__)


class InsightGenerator:
    """
    Turns chart data into a natural-language reading.

    Attempt 1 uses the full prompt and the initial token budget. A
    truncated reading switches to the constrained prompt and raises the
    budget by one step, up to the cap. A timeout gets one retry with the
    simplified prompt and a small budget. A transient provider error
    repeats the same request after a backoff. Each attempt is exactly one
    LLM call, so no more than `max_attempts` calls are made; anything that
    still fails yields the sample reading.
    """

    def __init__(
        self,
        *,
        llm: LLMClient,
        cfg: Optional[Settings] = None,
        classifier: Classifier = classify_completion,
    ):
        cfg = cfg or default_settings
        self.llm = llm
        self.classifier = classifier

        self.initial_tokens = cfg.OPENAI_MAX_TOKENS
        self.max_attempts = max(1, cfg.INSIGHT_MAX_ATTEMPTS)
        self.min_tokens = cfg.INSIGHT_MIN_COMPLETION_TOKENS
        self.token_step = cfg.INSIGHT_TOKEN_STEP
        self.token_cap = cfg.INSIGHT_MAX_TOKENS_CAP
        self.simplified_tokens = cfg.INSIGHT_SIMPLIFIED_MAX_TOKENS
        self.retry_policy = RetryPolicy.from_settings(cfg)

    async def generate_insight(self, birth: BirthInput, chart: ChartData) -> Insight:
        """
        Never raises: any failure returns the sample reading.
        """
        if not self.llm.configured:
            logger.warning("LLM is not configured; returning sample insight")
            return mock_insight(birth)

        try:
            return await self._generate(birth, chart)
        except AstroInsightsError as exc:
            logger.warning(f"Insight generation failed ({type(exc).__name__}: {exc}); returning sample insight")
        except Exception:
            logger.exception("Unexpected error during insight generation; returning sample insight")

        return mock_insight(birth)

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _generate(self, birth: BirthInput, chart: ChartData) -> Insight:
        prompt: Dict[str, str] = build_insight_prompt(birth, chart)
        budget = self.initial_tokens
        timed_out = False

        for attempt in range(1, self.max_attempts + 1):
            logger.info(f"Insight attempt {attempt}/{self.max_attempts} (max_tokens={budget})")
            try:
                completion = await self.llm.complete(
                    system_prompt=prompt["system"],
                    user_prompt=prompt["user"],
                    max_tokens=budget,
                    retries=1,
                )
            except LLMTimeoutError:
                if timed_out:
                    raise
                timed_out = True
                logger.warning("LLM timed out; retrying once with the simplified prompt")
                prompt = build_simplified_prompt(birth, chart)
                budget = self.simplified_tokens
                continue
            except TransientError as exc:
                if attempt == self.max_attempts:
                    raise
                delay = self.retry_policy.delay(attempt)
                logger.warning(f"LLM request failed ({exc}); retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
                continue

            verdict = self.classifier(
                completion,
                sections=INSIGHT_SECTIONS,
                min_tokens=min(self.min_tokens, budget // 4),
            )
            if verdict != Completeness.LIKELY_TRUNCATED:
                return Insight(text=completion.content, source=Provenance.LIVE, attempts=attempt)

            logger.warning(
                f"Insight looks truncated (finish_reason={completion.finish_reason}, "
                f"tokens={completion.completion_tokens}); switching to the structured prompt"
            )
            prompt = build_structured_prompt(birth, chart)
            budget = min(budget + self.token_step, self.token_cap)

        raise TruncationError(f"No complete insight after {self.max_attempts} attempts")
