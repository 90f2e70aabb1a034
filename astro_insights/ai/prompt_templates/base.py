from typing import Any, Dict, List
import json

from astro_insights.domain.schemas import BirthInput, ChartData


SYSTEM_INSTRUCTIONS = """
You are an expert Vedic Astrology (Jyotish) assistant.

IMPORTANT RULES:
- Use ONLY the provided chart data for placements.
- Do NOT invent planetary positions, signs, or houses.
- Do NOT give medical, legal, or absolute predictions.
- Avoid fatalistic or guaranteed language.
- Speak in tendencies and themes.
- Be warm, respectful, and grounded.
"""


def build_chart_facts(birth: BirthInput, chart: ChartData) -> str:
    """
    Render the chart facts shared by every prompt.
    """
    parts: List[str] = [
        f"Birth: {birth.date} at {birth.time} in {birth.place}.",
        "",
        "Here is the accurate birth chart data:",
        f"- Sun sign: {chart.sun.sign}",
        f"- Moon sign: {chart.moon.sign}",
        f"- Ascendant (Rising sign/Lagna): {chart.ascendant.sign}",
    ]

    if chart.kundli and chart.kundli.nakshatra:
        parts.append(f"- Moon nakshatra: {chart.kundli.nakshatra}")

    parts.append("\nPlanetary positions:")
    parts.append(_safe_json([p.model_dump() for p in chart.planets]))

    if chart.houses:
        parts.append(f"\nHouse information (House 1 is the Ascendant - {chart.ascendant.sign}):")
        parts.append(_safe_json([h.model_dump() for h in chart.houses]))

    parts.append(
        '\nNote: the "degree" values in the planetary positions are '
        "positions within the sign (0-30 degrees)."
    )
    return "\n".join(parts)


def build_messages(system_extra: str, user_prompt: str) -> Dict[str, str]:
    system_prompt = SYSTEM_INSTRUCTIONS.strip()
    if system_extra:
        system_prompt += "\n\n" + system_extra.strip()

    return {
        "system": system_prompt,
        "user": user_prompt.strip(),
    }


def _safe_json(data: Any) -> str:
    """
    Serialize data safely for LLM consumption.
    """
    return json.dumps(
        data,
        indent=2,
        ensure_ascii=False,
        default=str,
    )
