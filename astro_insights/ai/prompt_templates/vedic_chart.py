from typing import Dict

from astro_insights.ai.prompt_templates.base import build_chart_facts, build_messages
from astro_insights.domain.schemas import BirthInput, ChartData


JSON_ONLY = "Respond with VALID JSON only. No commentary before or after the JSON."

_BIRTH_CHART_SCHEMA = """
"birthChart": {
  "ascendant": [number 1-12],
  "planets": [
    {"id": "sun", "name": "Sun", "sign": [1-12], "house": [1-12], "degree": [degree within sign],
     "nakshatra": [nakshatra name], "isRetrograde": [boolean], "color": [hex color]}
  ],
  "houses": [
    {"number": [1-12], "sign": [1-12], "signName": [sign name], "lord": [planet],
     "planets": [planet names], "strength": "weak" | "moderate" | "strong", "aspects": [strings]}
  ]
}"""

_DASHAS_SCHEMA = """
"dashas": {
  "currentMahadasha": {"planet": [planet], "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD"},
  "currentAntardasha": {"planet": [planet], "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD"},
  "sequence": [{"planet": [planet], "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD"}]
}"""

_YOGAS_DOSHAS_SCHEMA = """
"yogas": [
  {"name": [yoga name], "strength": "weak" | "moderate" | "strong" | "very strong",
   "description": [brief description], "planets": [planet names], "houses": [house numbers]}
],
"doshas": [
  {"name": [dosha name], "severity": "mild" | "moderate" | "severe",
   "description": [brief description], "remedies": [strings], "affectedAreas": [strings]}
]"""


def build_vedic_chart_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    """
    One consolidated request for chart, dashas, yogas and doshas.
    """
    user_prompt = f"""
Generate a complete Vedic astrological chart analysis.

{build_chart_facts(birth, chart)}

Cover all of the following:
1. Birth Chart (ascendant, planets, houses), consistent with the data above
2. Dasha System (Vimshottari planetary periods)
3. Yogas (auspicious combinations)
4. Doshas (challenging combinations)

FORMAT YOUR RESPONSE AS JSON with this structure:
{{{_BIRTH_CHART_SCHEMA},{_DASHAS_SCHEMA},{_YOGAS_DOSHAS_SCHEMA}
}}
"""

    return build_messages(JSON_ONLY, user_prompt)


def build_dashas_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    nakshatra = (chart.kundli.nakshatra if chart.kundli else None) or "Unknown"

    user_prompt = f"""
Generate Vimshottari Dasha information for a person born on {birth.date}
at {birth.time} in {birth.place}.

- Moon sign: {chart.moon.sign}
- Moon nakshatra: {nakshatra}

Provide the current Mahadasha, the current Antardasha and the sequence of
Mahadashas for the next 50 years, calculated from the Moon's nakshatra.

FORMAT YOUR RESPONSE AS JSON with this structure:
{{{_DASHAS_SCHEMA}
}}
"""

    return build_messages(JSON_ONLY, user_prompt)


def build_yogas_doshas_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    user_prompt = f"""
Identify the yogas and doshas in this Vedic chart.

{build_chart_facts(birth, chart)}

FORMAT YOUR RESPONSE AS JSON with this structure:
{{{_YOGAS_DOSHAS_SCHEMA}
}}
"""

    return build_messages(JSON_ONLY, user_prompt)
