from typing import Dict

from astro_insights.ai.prompt_templates.base import build_chart_facts, build_messages
from astro_insights.domain.schemas import BirthInput, ChartData


INSIGHT_SECTIONS = [
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

_NUMBERED_RULE = (
    "IMPORTANT: Do NOT use dashes, asterisks, or markdown formatting in this section. "
    "Begin each numbered point with a short 2-4 word summary in double quotes, "
    "followed by an explanation."
)


def build_insight_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    """
    Full reading prompt with the fixed section layout.
    """
    name = birth.name or "the native"

    user_prompt = f"""
Generate a concise Vedic astrological reading for {name}.

{build_chart_facts(birth, chart)}

FORMAT YOUR RESPONSE EXACTLY LIKE THIS:

## Birth Data
- Name: {name}
- Birth Date: {birth.date}
- Birth Time: {birth.time}
- Birth Place: {birth.place}
- Sun Sign: {chart.sun.sign}
- Moon Sign: {chart.moon.sign}

## Defining Word
[ONE single positive, current slang word that captures this person's core essence, e.g. Main Character, Iconic, Elite]

## Ascendant/Lagna
[A 30-40 word description of the {chart.ascendant.sign} ascendant and its influence on appearance, approach to life, and how others perceive them]

## Personality Overview
[A 20-30 word description of the core personality based on Sun, Moon and Ascendant]

## Key Strengths
{_NUMBERED_RULE}

1. "Key strength summary" planetary placements supporting this strength
2. "Another strength summary" planetary placements supporting this strength
3. "Third strength summary" planetary placements supporting this strength
4. "Fourth strength summary" planetary placements supporting this strength

## Potential Challenges
{_NUMBERED_RULE}

1. "Challenge summary" planetary placements behind this challenge
2. "Another challenge summary" planetary placements behind this challenge
3. "Third challenge summary" planetary placements behind this challenge
4. "Fourth challenge summary" planetary placements behind this challenge

## Significant Chart Features
{_NUMBERED_RULE}

1. "Feature summary" its significance in the chart
2. "Another feature summary" its significance in the chart
3. "Third feature summary" its significance in the chart
4. "Fourth feature summary" its significance in the chart

## Career Insights
{_NUMBERED_RULE}

1. "First career insight" career path based on the chart
2. "Second career insight" talents based on the chart
3. "Third career insight" professional timing based on the chart

## Relationship Patterns
{_NUMBERED_RULE}

1. "First relationship pattern" details of this pattern
2. "Second relationship pattern" details of this pattern
3. "Third relationship pattern" details of this pattern

You must follow this format exactly, keeping descriptions concise and direct.
"""

    return build_messages("", user_prompt)


def build_structured_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    """
    Constrained rewrite used after a truncated reading: every section is
    enumerated with a hard length limit so the whole reading fits.
    """
    name = birth.name or "the native"
    headers = "\n".join(f"{i}. {header}" for i, header in enumerate(INSIGHT_SECTIONS, start=1))

    user_prompt = f"""
Generate a Vedic astrological reading for {name}.

{build_chart_facts(birth, chart)}

Your previous answer was cut off. Write ALL {len(INSIGHT_SECTIONS)} sections below,
in this exact order, each starting with its header line exactly as written:

{headers}

Rules:
- Birth Data: five short "- Key: value" lines.
- Defining Word: one word or short phrase.
- Ascendant/Lagna and Personality Overview: at most 30 words each.
- Every other section: exactly 3 numbered points of at most 20 words each.
- The reading MUST end with the "{INSIGHT_SECTIONS[-1]}" section.
"""

    return build_messages(
        "Keep the whole reading short. Completeness matters more than detail.",
        user_prompt,
    )


def build_simplified_prompt(birth: BirthInput, chart: ChartData) -> Dict[str, str]:
    """
    Short prompt used after an LLM timeout.
    """
    user_prompt = f"""
Give a brief Vedic astrology reading for someone with
Sun in {chart.sun.sign}, Moon in {chart.moon.sign} and {chart.ascendant.sign} ascendant,
born {birth.date} at {birth.time} in {birth.place}.

Use these headers, with one or two sentences under each:
{chr(10).join(INSIGHT_SECTIONS)}
"""

    return build_messages("", user_prompt)
