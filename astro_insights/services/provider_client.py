import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from astro_insights.config import Settings, settings as default_settings
from astro_insights.domain.errors import AuthError, FatalProviderError, TransientError
from astro_insights.domain.schemas import AuthToken
from astro_insights.services.retry import RetryPolicy, retry_async
from astro_insights.services.token_manager import TokenManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """
    Everything needed to talk to the astrology data provider.
    """
    base_url: str = "https://api.prokerala.com/v2/astrology"
    token_url: str = "https://api.prokerala.com/token"
    client_id: str = ""
    client_secret: str = ""
    endpoints: Dict[str, str] = field(default_factory=lambda: {
        "planet_position": "planet-position",
        "kundli": "kundli",
        "chart": "chart",
    })
    ayanamsa: int = 1
    utc_offset: str = "+05:30"
    chart_type: str = "rasi"
    chart_style: str = "north-indian"
    timeout: float = 30.0
    token_safety_margin: float = 600

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "ProviderConfig":
        cfg = cfg or default_settings
        return cls(
            base_url=cfg.PROKERALA_BASE_URL,
            token_url=cfg.PROKERALA_TOKEN_URL,
            client_id=cfg.PROKERALA_CLIENT_ID,
            client_secret=cfg.PROKERALA_CLIENT_SECRET,
            ayanamsa=cfg.PROKERALA_AYANAMSA,
            utc_offset=cfg.BIRTH_UTC_OFFSET,
            timeout=cfg.PROKERALA_TIMEOUT,
            token_safety_margin=cfg.TOKEN_SAFETY_MARGIN,
        )

    def url_for(self, endpoint: str) -> str:
        path = self.endpoints.get(endpoint, endpoint)
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class ProkeralaClient:
    """
    Authenticated GET client for the provider's astrology endpoints.

    - 401: refresh the token and retry exactly once
    - 5xx / 429 / network errors: exponential backoff
    - other 4xx or malformed bodies: FatalProviderError
    """

    def __init__(
        self,
        *,
        config: ProviderConfig,
        token_manager: TokenManager,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.token_manager = token_manager
        self.retry_policy = retry_policy or RetryPolicy()
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ProkeralaClient":
        token_manager = TokenManager(
            token_url=config.token_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            safety_margin=config.token_safety_margin,
            timeout=config.timeout,
            transport=transport,
        )
        return cls(
            config=config,
            token_manager=token_manager,
            retry_policy=retry_policy,
            transport=transport,
        )

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def get(
        self,
        endpoint: str,
        params: Dict[str, Any],
        token: AuthToken,
    ) -> Dict[str, Any]:
        """
        GET an endpoint and return the `data` object of an "ok" response.
        """
        try:
            return await self._get_with_retry(endpoint, params, token)
        except AuthError as exc:
            if exc.status_code != 401:
                raise
            logger.info(f"Provider rejected token for '{endpoint}'; refreshing and retrying once")

        fresh = await self.token_manager.refresh(stale=token)
        try:
            return await self._get_with_retry(endpoint, params, fresh)
        except AuthError as exc:
            if exc.status_code == 401:
                self.token_manager.invalidate()
                raise AuthError(
                    f"Provider rejected a freshly issued token for '{endpoint}'",
                    status_code=401,
                ) from exc
            raise

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _get_with_retry(
        self,
        endpoint: str,
        params: Dict[str, Any],
        token: AuthToken,
    ) -> Dict[str, Any]:
        return await retry_async(
            lambda: self._send(endpoint, params, token),
            policy=self.retry_policy,
            description=f"Provider {endpoint}",
        )

    async def _send(
        self,
        endpoint: str,
        params: Dict[str, Any],
        token: AuthToken,
    ) -> Dict[str, Any]:
        url = self.config.url_for(endpoint)

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={
                        "Authorization": f"Bearer {token.value}",
                        "Accept": "application/json",
                    },
                    timeout=self.config.timeout,
                )
        except httpx.HTTPError as exc:
            raise TransientError(f"Provider {endpoint} unreachable: {exc}") from exc

        status = response.status_code
        if status == 401:
            raise AuthError(f"Provider {endpoint} returned 401", status_code=401)
        if status == 429 or status >= 500:
            raise TransientError(f"Provider {endpoint} returned {status}", status_code=status)
        if status >= 400:
            raise FatalProviderError(f"Provider {endpoint} rejected request: {status} {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as exc:
            raise FatalProviderError(f"Provider {endpoint} returned invalid JSON") from exc

        if not isinstance(body, dict) or body.get("status") != "ok":
            raise FatalProviderError(f"Provider {endpoint} returned an error payload")

        data = body.get("data")
        if not isinstance(data, dict):
            raise FatalProviderError(f"Provider {endpoint} response has no data object")
        return data
