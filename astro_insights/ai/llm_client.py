import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from astro_insights.config import Settings, settings as default_settings
from astro_insights.domain.errors import (
    AuthError,
    FatalProviderError,
    LLMTimeoutError,
    TransientError,
)
from astro_insights.services.retry import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class LLMCompletion:
    """
    Text of a chat completion plus the metadata the truncation
    classifier needs.
    """
    content: str
    finish_reason: Optional[str] = None
    completion_tokens: Optional[int] = None


class LLMClient:
    """
    Low-level async LLM client for any OpenAI-compatible
    chat-completions endpoint (OpenAI, Together AI, ...).

    This class:
    - talks to the LLM provider
    - retries connection errors, 429 and 5xx with backoff
    - surfaces timeouts immediately as LLMTimeoutError
    - returns the completion text with its finish reason and token usage
    """

    def __init__(
        self,
        *,
        cfg: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        cfg = cfg or default_settings

        self.api_key = cfg.OPENAI_API_KEY
        self.timeout = cfg.OPENAI_TIMEOUT
        self.retries = max(1, cfg.OPENAI_RETRIES)
        self.retry_policy = retry_policy or RetryPolicy.from_settings(cfg)

        self.client = client or AsyncOpenAI(
            api_key=self.api_key or "unconfigured",
            base_url=cfg.OPENAI_BASE_URL,
            timeout=self.timeout,
            max_retries=0,
        )

        self.model = model or cfg.OPENAI_MODEL
        self.temperature = (
            temperature
            if temperature is not None
            else cfg.OPENAI_TEMPERATURE
        )
        self.max_tokens = (
            max_tokens
            if max_tokens is not None
            else cfg.OPENAI_MAX_TOKENS
        )
        self._injected = client is not None

    @property
    def configured(self) -> bool:
        return self._injected or bool(self.api_key)

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        retries: Optional[int] = None,
    ) -> LLMCompletion:
        """
        Generate a completion from the LLM.

        `retries` overrides the configured number of tries for this call;
        pass 1 when the caller runs its own attempt loop.
        """
        if not self.configured:
            raise AuthError("LLM API key is not configured")

        retries = max(1, retries) if retries is not None else self.retries
        for attempt in range(1, retries + 1):
            try:
                return await self._call_llm(
                    system_prompt,
                    user_prompt,
                    max_tokens=max_tokens or self.max_tokens,
                    temperature=temperature if temperature is not None else self.temperature,
                )

            except LLMTimeoutError:
                raise

            except TransientError as exc:
                if attempt == retries:
                    logger.warning(f"LLM request failed after {attempt} attempts: {exc}")
                    raise
                delay = self.retry_policy.delay(attempt)
                logger.info(f"LLM request failed ({exc}); retrying in {delay:.2f}s")
                await asyncio.sleep(delay)

        raise TransientError("LLM request failed")

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _call_llm(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> LLMCompletion:
        """
        Perform the actual LLM call and map SDK errors onto domain errors.
        """
        try:
            completion: ChatCompletion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise LLMTimeoutError(f"LLM request timed out after {self.timeout}s") from exc
        except openai.APIConnectionError as exc:
            raise TransientError(f"LLM endpoint unreachable: {exc}") from exc
        except openai.AuthenticationError as exc:
            raise AuthError(f"LLM rejected credentials: {exc}", status_code=exc.status_code) from exc
        except (openai.RateLimitError, openai.InternalServerError) as exc:
            raise TransientError(f"LLM temporarily unavailable: {exc}", status_code=exc.status_code) from exc
        except openai.APIStatusError as exc:
            raise FatalProviderError(f"LLM rejected request: {exc.status_code} {exc}") from exc

        if not completion.choices:
            return LLMCompletion(content="")

        choice = completion.choices[0]
        usage = completion.usage
        return LLMCompletion(
            content=(choice.message.content or "").strip(),
            finish_reason=choice.finish_reason,
            completion_tokens=usage.completion_tokens if usage else None,
        )
