import unittest
from unittest.mock import AsyncMock, MagicMock

import openai

from astro_insights.ai.llm_client import LLMClient
from astro_insights.ai.truncation import Completeness
from astro_insights.data.mock_data import mock_chart_data
from astro_insights.domain.errors import FatalProviderError, LLMTimeoutError, TransientError
from astro_insights.domain.schemas import BirthInput, Provenance
from astro_insights.services.insight_service import InsightGenerator

from astro_fixtures import (
    COMPLETE_READING,
    TRUNCATED_READING,
    ScriptedLLM,
    chat_completion,
    completion,
    make_settings,
    status_error,
)

BIRTH = BirthInput.create(date="2000-06-15", time="10:15", place="Morena MP", name="Test")
CHART = mock_chart_data(BIRTH)


class TestInsightGenerator(unittest.IsolatedAsyncioTestCase):

    def _generator(self, llm, **kwargs):
        return InsightGenerator(llm=llm, cfg=make_settings(), **kwargs)

    async def test_complete_first_attempt(self):
        llm = ScriptedLLM(completion(COMPLETE_READING, tokens=1200))

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.LIVE)
        self.assertEqual(insight.attempts, 1)
        self.assertEqual(insight.text, COMPLETE_READING)
        self.assertEqual(llm.calls[0]["max_tokens"], 1500)
        self.assertIn("## Relationship Patterns", llm.calls[0]["user_prompt"])
        self.assertIn("Simha", llm.calls[0]["user_prompt"])

    async def test_truncation_escalates_prompt_and_budget(self):
        llm = ScriptedLLM(
            completion(TRUNCATED_READING, finish_reason="length", tokens=1500),
            completion(COMPLETE_READING, tokens=1400),
        )

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.LIVE)
        self.assertEqual(insight.attempts, 2)
        self.assertEqual([c["max_tokens"] for c in llm.calls], [1500, 2500])
        self.assertIn("previous answer was cut off", llm.calls[1]["user_prompt"])

    async def test_attempts_never_exceed_maximum(self):
        llm = ScriptedLLM(*[completion(TRUNCATED_READING, finish_reason="length") for _ in range(10)])

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(len(llm.calls), 3)
        self.assertEqual([c["max_tokens"] for c in llm.calls], [1500, 2500, 3500])
        self.assertEqual(insight.source, Provenance.MOCK)

    async def test_budget_is_capped(self):
        llm = ScriptedLLM(*[completion(TRUNCATED_READING, finish_reason="length") for _ in range(5)])
        generator = InsightGenerator(llm=llm, cfg=make_settings(INSIGHT_MAX_ATTEMPTS=5))

        await generator.generate_insight(BIRTH, CHART)

        self.assertEqual([c["max_tokens"] for c in llm.calls], [1500, 2500, 3500, 4000, 4000])

    async def test_timeout_retries_once_with_simplified_prompt(self):
        llm = ScriptedLLM(LLMTimeoutError("slow"), completion(COMPLETE_READING, tokens=700))

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.LIVE)
        self.assertEqual(llm.calls[1]["max_tokens"], 800)
        self.assertIn("brief Vedic astrology reading", llm.calls[1]["user_prompt"])

    async def test_second_timeout_returns_mock(self):
        llm = ScriptedLLM(LLMTimeoutError("slow"), LLMTimeoutError("still slow"), completion(COMPLETE_READING))

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.MOCK)
        self.assertEqual(len(llm.calls), 2)

    async def test_provider_failures_return_mock(self):
        for error in (TransientError("down", status_code=503), FatalProviderError("bad request")):
            with self.subTest(error=error):
                llm = ScriptedLLM(error)

                insight = await self._generator(llm).generate_insight(BIRTH, CHART)

                self.assertEqual(insight.source, Provenance.MOCK)
                self.assertIn(BIRTH.place, insight.text)

    async def test_transient_error_uses_up_an_attempt(self):
        llm = ScriptedLLM(TransientError("busy", status_code=503), completion(COMPLETE_READING, tokens=1200))

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.LIVE)
        self.assertEqual(insight.attempts, 2)
        self.assertEqual([c["max_tokens"] for c in llm.calls], [1500, 1500])
        self.assertEqual([c["retries"] for c in llm.calls], [1, 1])

    async def test_interleaved_server_errors_stay_within_attempt_bound(self):
        outcomes = []
        for _ in range(5):
            outcomes.append(status_error(openai.InternalServerError, 500))
            outcomes.append(chat_completion(TRUNCATED_READING, finish_reason="length", completion_tokens=1500))
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(side_effect=outcomes)
        settings = make_settings()
        llm = LLMClient(cfg=settings, client=sdk)

        insight = await InsightGenerator(llm=llm, cfg=settings).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.MOCK)
        self.assertEqual(sdk.chat.completions.create.await_count, 3)

    async def test_unexpected_error_returns_mock(self):
        llm = ScriptedLLM(RuntimeError("boom"))

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.MOCK)

    async def test_unconfigured_llm_skips_calls(self):
        llm = ScriptedLLM(configured=False)

        insight = await self._generator(llm).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.MOCK)
        self.assertEqual(llm.calls, [])

    async def test_classifier_is_pluggable(self):
        classifier = MagicMock(return_value=Completeness.UNKNOWN)
        llm = ScriptedLLM(completion("free-form reading without headers"))

        insight = await self._generator(llm, classifier=classifier).generate_insight(BIRTH, CHART)

        self.assertEqual(insight.source, Provenance.LIVE)
        classifier.assert_called_once()


if __name__ == "__main__":
    unittest.main()
