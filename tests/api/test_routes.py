import unittest

import httpx
from fastapi.testclient import TestClient

from astro_insights.api.dependencies import get_astrology_service
from astro_insights.cache.base import ResponseCache
from astro_insights.main import app
from astro_insights.services.astrology_service import build_astrology_service

from astro_fixtures import COMPLETE_READING, ScriptedLLM, UpstreamStub, completion, make_settings

MORENA = {"date": "2000-06-15", "time": "10:15", "place": "Morena MP", "name": "Test"}


class TestRoutes(unittest.TestCase):

    def setUp(self):
        self.upstream = UpstreamStub()
        self.llm = ScriptedLLM(completion(COMPLETE_READING, tokens=1200))
        self.cache = ResponseCache()
        self.service = build_astrology_service(
            make_settings(),
            transport=self.upstream.transport,
            llm=self.llm,
            cache=self.cache,
        )
        app.dependency_overrides[get_astrology_service] = lambda: self.service
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        response = self.client.get("/api/v1/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_location_search(self):
        response = self.client.get("/api/v1/locations/search", params={"q": "morena"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["display_name"], "Morena, Madhya Pradesh, India")

    def test_location_search_upstream_failure(self):
        self.upstream.routes["/search"] = lambda r: httpx.Response(403)

        response = self.client.get("/api/v1/locations/search", params={"q": "morena"})

        self.assertEqual(response.status_code, 502)

    def test_location_search_requires_query(self):
        response = self.client.get("/api/v1/locations/search", params={"q": "m"})

        self.assertEqual(response.status_code, 422)

    def test_insight(self):
        response = self.client.post("/api/v1/insight", json=MORENA)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["source"], "live")
        self.assertEqual(len(body["data"]["sections"]), 9)

    def test_insight_invalid_input(self):
        response = self.client.post("/api/v1/insight", json={**MORENA, "date": "31/02/2000"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("date", body["error"])

    def test_vedic_chart_uses_camel_case(self):
        self.upstream.routes["/search"] = lambda r: httpx.Response(200, json=[])

        response = self.client.post("/api/v1/vedic-chart", json=MORENA)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["isSample"])
        self.assertIn("birthChart", body)
        self.assertIn("currentMahadasha", body["dashas"])

    def test_preload_and_clear_cache(self):
        self.upstream.routes["/search"] = lambda r: httpx.Response(200, json=[])

        preload = self.client.post("/api/v1/preload", json=MORENA)
        self.assertEqual(preload.json(), {"preloaded": False})

        self.client.post("/api/v1/insight", json=MORENA)
        self.cache.set("extra", 1)
        cleared = self.client.delete("/api/v1/cache")

        self.assertEqual(cleared.status_code, 200)
        self.assertEqual(len(self.cache), 0)


if __name__ == "__main__":
    unittest.main()
