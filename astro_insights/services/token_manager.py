import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from astro_insights.domain.errors import AuthError
from astro_insights.domain.schemas import AuthToken

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 3600


class TokenManager:
    """
    Obtains and caches the provider's OAuth2 client-credentials token.

    The token is reused until `expires_at`, which already has the safety
    margin subtracted. Refreshes are serialised so concurrent callers
    share one token request.
    """

    def __init__(
        self,
        *,
        token_url: str,
        client_id: str,
        client_secret: str,
        safety_margin: float = 600,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.safety_margin = safety_margin
        self.timeout = timeout
        self.transport = transport
        self.clock = clock

        self._token: Optional[AuthToken] = None
        self._lock = asyncio.Lock()

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def get_token(self) -> AuthToken:
        """
        Return the cached token, fetching a new one if missing or expired.
        """
        token = self._token
        if token is not None and token.is_valid(self.clock()):
            return token

        async with self._lock:
            token = self._token
            if token is not None and token.is_valid(self.clock()):
                return token
            self._token = await self._request_token()
            return self._token

    async def refresh(self, stale: Optional[AuthToken] = None) -> AuthToken:
        """
        Discard `stale` (rejected with a 401) and return a fresh token.

        If another coroutine already replaced `stale`, its token is reused.
        """
        async with self._lock:
            current = self._token
            if current is not None and stale is not None and current.value != stale.value:
                return current
            self._token = None
            self._token = await self._request_token()
            return self._token

    def invalidate(self) -> None:
        self._token = None

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _request_token(self) -> AuthToken:
        if not self.configured:
            raise AuthError("Provider client credentials are not configured")

        logger.debug("Requesting new provider OAuth token")
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.token_url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                    },
                    timeout=self.timeout,
                )
        except httpx.HTTPError as exc:
            raise AuthError(f"Cannot reach token endpoint: {exc}") from exc

        if response.status_code != 200:
            raise AuthError(
                f"Token request failed: {response.status_code} - {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError("Token endpoint returned invalid JSON", status_code=response.status_code) from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise AuthError("Token response has no access_token", status_code=response.status_code)

        expires_in = float(payload.get("expires_in") or DEFAULT_EXPIRES_IN)
        token = AuthToken(
            value=access_token,
            expires_at=self.clock() + expires_in - self.safety_margin,
        )
        logger.info(f"Obtained provider token (valid for {expires_in - self.safety_margin:.0f}s)")
        return token


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "unknown error"

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return str(errors[0].get("detail") or errors[0].get("title") or errors)
        return str(body.get("error_description") or body.get("error") or body.get("message") or body)
    return str(body)
