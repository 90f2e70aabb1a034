import json
import re
from typing import Any, Dict, List

from astro_insights.domain.errors import ResponseParseError

_FENCED_JSON = re.compile(r"```json\s*\n(.*?)\n?```", re.DOTALL)
_FENCED_ANY = re.compile(r"```\s*\n(.*?)\n?```", re.DOTALL)


def extract_json(raw_text: str) -> Dict[str, Any]:
    """
    Pull a JSON object out of an LLM response.

    This function is intentionally tolerant:
    - a ```json fenced block
    - any fenced block
    - otherwise the span from the first "{" to the last "}"
    """
    candidates: List[str] = []

    for pattern in (_FENCED_JSON, _FENCED_ANY):
        match = pattern.search(raw_text)
        if match:
            candidates.append(match.group(1))

    start, end = raw_text.find("{"), raw_text.rfind("}")
    if start != -1 and end > start:
        candidates.append(raw_text[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data

    raise ResponseParseError("LLM response does not contain a JSON object")


def parse_insight_sections(raw_text: str) -> List[Dict[str, str]]:
    """
    Split a markdown reading on its "## " headers.
    """
    cleaned = _clean_text(raw_text)
    sections: List[Dict[str, str]] = []

    for block in re.split(r"^##\s+", cleaned, flags=re.MULTILINE)[1:]:
        title, _, body = block.partition("\n")
        sections.append(
            {
                "title": title.strip(),
                "content": body.strip(),
            }
        )

    return sections


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def _clean_text(text: str) -> str:
    """
    Normalize whitespace and remove noise.
    """
    text = text.strip()
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text
