import unittest

from astro_insights.data.mock_data import (
    MOCK_DASHAS,
    MOCK_VEDIC_CHART,
    PARTIAL_SAMPLE_ADVISORY,
    mock_chart_data,
)
from astro_insights.domain.errors import AuthError, LLMTimeoutError
from astro_insights.domain.schemas import BirthInput
from astro_insights.services.vedic_chart_service import VedicChartBuilder

from astro_fixtures import ScriptedLLM, completion, json_completion, make_settings

BIRTH = BirthInput.create(date="2000-06-15", time="10:15", place="Morena MP", name="Test")
CHART = mock_chart_data(BIRTH)


def llm_chart_json(ascendant=5):
    data = MOCK_VEDIC_CHART.model_dump(by_alias=True, exclude={"is_sample", "advisory"})
    data["birthChart"]["ascendant"] = ascendant
    return data


class TestVedicChartBuilder(unittest.IsolatedAsyncioTestCase):

    def _builder(self, llm):
        return VedicChartBuilder(llm=llm, cfg=make_settings())

    async def test_consolidated_request(self):
        llm = ScriptedLLM(json_completion(llm_chart_json()))

        vedic = await self._builder(llm).build(BIRTH, CHART)

        self.assertFalse(vedic.is_sample)
        self.assertIsNone(vedic.advisory)
        self.assertEqual(vedic.birth_chart.ascendant, 5)
        self.assertEqual(len(llm.calls), 1)
        self.assertEqual(llm.calls[0]["max_tokens"], 4000)
        self.assertEqual(llm.calls[0]["temperature"], 0.2)

    async def test_inconsistent_ascendant_uses_provider_chart(self):
        llm = ScriptedLLM(json_completion(llm_chart_json(ascendant=1)))

        vedic = await self._builder(llm).build(BIRTH, CHART)

        self.assertEqual(vedic.birth_chart.ascendant, 5)
        self.assertEqual(vedic.birth_chart.houses[0].sign_name, "Leo")

    async def test_falls_back_to_components(self):
        yogas_doshas = {
            "yogas": [{"name": "Gajakesari Yoga", "strength": "strong", "description": "Jupiter and Moon"}],
            "doshas": [],
        }
        llm = ScriptedLLM(
            completion("Sorry, I cannot produce JSON."),
            json_completion(MOCK_DASHAS.model_dump(by_alias=True)),
            json_completion(yogas_doshas),
        )

        vedic = await self._builder(llm).build(BIRTH, CHART)

        self.assertEqual(len(llm.calls), 3)
        self.assertIsNone(vedic.advisory)
        self.assertEqual(vedic.birth_chart.ascendant, 5)
        self.assertEqual([y.name for y in vedic.yogas], ["Gajakesari Yoga"])
        self.assertEqual(vedic.dashas.current_mahadasha.planet, MOCK_DASHAS.current_mahadasha.planet)

    async def test_failed_components_use_sample_with_advisory(self):
        llm = ScriptedLLM(
            LLMTimeoutError("slow"),
            LLMTimeoutError("slow"),
            completion('{"yogas": [{"name": "Broken", "strength": "legendary"}]}'),
        )

        vedic = await self._builder(llm).build(BIRTH, CHART)

        self.assertFalse(vedic.is_sample)
        self.assertEqual(vedic.advisory, PARTIAL_SAMPLE_ADVISORY)
        self.assertEqual(vedic.birth_chart.ascendant, 5)
        self.assertEqual(vedic.dashas, MOCK_DASHAS)

    async def test_unconfigured_llm_raises(self):
        with self.assertRaises(AuthError):
            await self._builder(ScriptedLLM(configured=False)).build(BIRTH, CHART)


if __name__ == "__main__":
    unittest.main()
