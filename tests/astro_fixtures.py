"""
Canned upstream payloads and fakes shared by the test modules.
"""
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
from openai.types.chat import ChatCompletion

from astro_insights.ai.llm_client import LLMCompletion
from astro_insights.config import Settings
from astro_insights.domain.errors import LLMTimeoutError


def make_settings(**overrides: Any) -> Settings:
    values = dict(
        PROKERALA_CLIENT_ID="client-id",
        PROKERALA_CLIENT_SECRET="client-secret",
        OPENAI_API_KEY="sk-test",
        RETRY_BASE_DELAY=0.0,
        RETRY_JITTER=0.0,
        _env_file=None,
    )
    values.update(overrides)
    return Settings(**values)


# ─────────────────────────────────────────────
# Provider payloads (2000-06-15 10:15 IST, Morena MP)
# ─────────────────────────────────────────────

def _body(name: str, sign: str, degree: float, retro: bool = False) -> Dict[str, Any]:
    return {
        "name": name,
        "rasi": {"name": sign, "lord": {"name": "?"}},
        "degree": degree,
        "is_retrograde": retro,
    }


MORENA_PLANETS: List[Dict[str, Any]] = [
    _body("Ascendant", "Simha", 14.2),
    _body("Sun", "Mithuna", 0.6),
    _body("Moon", "Tula", 18.3),
    _body("Mercury", "Mithuna", 21.0),
    _body("Venus", "Mithuna", 4.8),
    _body("Mars", "Mithuna", 9.9),
    _body("Jupiter", "Vrishabha", 3.1),
    _body("Saturn", "Mesha", 28.4),
    _body("Rahu", "Karka", 8.7, True),
    _body("Ketu", "Makara", 8.7, True),
]


def planet_position_payload(planets: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {
        "status": "ok",
        "data": {"planet_position": planets if planets is not None else MORENA_PLANETS},
    }


def kundli_payload() -> Dict[str, Any]:
    return {
        "status": "ok",
        "data": {
            "nakshatra_details": {
                "nakshatra": {"id": 14, "name": "Swati", "lord": {"name": "Rahu"}},
                "chandra_rasi": {"name": "Tula"},
                "soorya_rasi": {"name": "Mithuna"},
            },
            "mangal_dosha": {"has_dosha": False, "description": "No Manglik dosha"},
            "yoga_details": [{"name": "Budha Aditya Yoga"}, {"name": "Gajakesari Yoga"}],
        },
    }


def chart_payload(**extra: Any) -> Dict[str, Any]:
    return {"status": "ok", "data": {"chart_type": "rasi", **extra}}


# ─────────────────────────────────────────────
# Upstream transport
# ─────────────────────────────────────────────

class UpstreamStub:
    """
    httpx.MockTransport handler standing in for Nominatim and Prokerala.

    Each route maps to a callable returning an httpx.Response; every
    request is recorded in `calls`.
    """

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {
            "/search": lambda r: httpx.Response(
                200, json=[{"lat": "26.4947", "lon": "77.9940", "display_name": "Morena, Madhya Pradesh, India"}]
            ),
            "/token": lambda r: httpx.Response(
                200, json={"access_token": f"token-{self.count('/token')}", "expires_in": 3600}
            ),
            "/v2/astrology/planet-position": lambda r: httpx.Response(200, json=planet_position_payload()),
            "/v2/astrology/kundli": lambda r: httpx.Response(200, json=kundli_payload()),
            "/v2/astrology/chart": lambda r: httpx.Response(200, json=chart_payload()),
        }

    def count(self, path: str) -> int:
        return sum(1 for r in self.calls if r.url.path == path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# ─────────────────────────────────────────────
# LLM fake
# ─────────────────────────────────────────────

COMPLETE_READING = "\n\n".join(
    f"{header}\n" + ("Balanced, warm and steady placements shape this area of life. " * 12)
    for header in [
        "## Birth Data",
        "## Defining Word",
        "## Ascendant/Lagna",
        "## Personality Overview",
        "## Key Strengths",
        "## Potential Challenges",
        "## Significant Chart Features",
        "## Career Insights",
        "## Relationship Patterns",
    ]
)

TRUNCATED_READING = "## Birth Data\n- Name: Test\n\n## Defining Word\nIconic\n\n## Ascendant/Lagna\nLeo rising gives"


class ScriptedLLM:
    """
    Stand-in for LLMClient that replays scripted outcomes.

    Each entry is an LLMCompletion to return or an exception to raise.
    """

    def __init__(self, *outcomes: Any, configured: bool = True):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []
        self.configured = configured

    async def complete(self, *, system_prompt, user_prompt, max_tokens=None, temperature=None, retries=None):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "retries": retries,
            }
        )
        if not self.outcomes:
            raise LLMTimeoutError("no scripted outcome left")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def completion(content: str, finish_reason: str = "stop", tokens: Optional[int] = None) -> LLMCompletion:
    return LLMCompletion(content=content, finish_reason=finish_reason, completion_tokens=tokens)


def json_completion(data: Dict[str, Any]) -> LLMCompletion:
    return completion(f"Here is the analysis:\n```json\n{json.dumps(data)}\n```", tokens=900)


# ─────────────────────────────────────────────
# OpenAI SDK objects
# ─────────────────────────────────────────────

LLM_REQUEST = httpx.Request("POST", "https://api.together.xyz/v1/chat/completions")


def chat_completion(content: str, finish_reason: str = "stop", completion_tokens: int = 42) -> ChatCompletion:
    return ChatCompletion.model_validate({
        "id": "cmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "meta-llama/Llama-3-70b-chat-hf",
        "choices": [
            {
                "index": 0,
                "finish_reason": finish_reason,
                "message": {"role": "assistant", "content": content},
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": completion_tokens, "total_tokens": 10 + completion_tokens},
    })


def status_error(cls: type, status: int) -> Exception:
    return cls("upstream said no", response=httpx.Response(status, request=LLM_REQUEST), body=None)
