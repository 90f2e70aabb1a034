import logging
from enum import Enum
from typing import Callable, Sequence

from astro_insights.ai.llm_client import LLMCompletion

logger = logging.getLogger(__name__)

DEFAULT_MIN_TOKENS = 300
CHARS_PER_TOKEN = 4

TRUNCATING_FINISH_REASONS = {"length", "max_tokens"}


class Completeness(str, Enum):
    COMPLETE = "complete"
    LIKELY_TRUNCATED = "likely_truncated"
    UNKNOWN = "unknown"


Classifier = Callable[..., Completeness]


def estimate_tokens(text: str) -> int:
    return len(text) // CHARS_PER_TOKEN


def classify_completion(
    completion: LLMCompletion,
    *,
    sections: Sequence[str],
    min_tokens: int = DEFAULT_MIN_TOKENS,
) -> Completeness:
    """
    Decide whether a reading looks cut off.

    LIKELY_TRUNCATED when:
    - the content is empty
    - the provider stopped on its token limit
    - fewer than `min_tokens` completion tokens came back
    - some expected headers are present but the last one is missing

    A reading with none of the expected headers is UNKNOWN; it may be
    complete but unstructured, so callers accept it.
    """
    content = completion.content.strip()
    if not content:
        return Completeness.LIKELY_TRUNCATED

    if (completion.finish_reason or "").lower() in TRUNCATING_FINISH_REASONS:
        logger.debug(f"Completion stopped on finish_reason={completion.finish_reason}")
        return Completeness.LIKELY_TRUNCATED

    tokens = completion.completion_tokens
    if tokens is None:
        tokens = estimate_tokens(content)
    if tokens < min_tokens:
        logger.debug(f"Completion has only {tokens} tokens (min {min_tokens})")
        return Completeness.LIKELY_TRUNCATED

    if not sections:
        return Completeness.UNKNOWN

    present = [header for header in sections if header in content]
    if not present:
        return Completeness.UNKNOWN
    if sections[-1] not in present:
        logger.debug(f"Completion is missing final section {sections[-1]!r}")
        return Completeness.LIKELY_TRUNCATED

    return Completeness.COMPLETE
