import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from astro_insights.config import Settings, settings as default_settings
from astro_insights.domain.errors import TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff with additive jitter.

    delay(n) = base_delay * factor ** (n - 1) + random() * jitter
    """
    attempts: int = 3
    base_delay: float = 1.0
    factor: float = 2.0
    jitter: float = 0.5

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "RetryPolicy":
        cfg = cfg or default_settings
        return cls(
            attempts=cfg.RETRY_ATTEMPTS,
            base_delay=cfg.RETRY_BASE_DELAY,
            factor=cfg.RETRY_FACTOR,
            jitter=cfg.RETRY_JITTER,
        )

    def delay(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        return self.base_delay * self.factor ** (attempt - 1) + rng() * self.jitter


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...] = (TransientError,),
    description: str = "request",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run `operation`, retrying on `retry_on` errors up to policy.attempts
    calls in total. The last error is re-raised once attempts run out.
    """
    attempts = max(1, policy.attempts)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt == attempts:
                logger.warning(f"{description} failed after {attempt} attempts: {exc}")
                raise
            delay = policy.delay(attempt)
            logger.info(
                f"{description} failed ({exc}); retrying in {delay:.2f}s "
                f"(attempt {attempt}/{attempts})"
            )
            await sleep(delay)

    raise RuntimeError("unreachable")
