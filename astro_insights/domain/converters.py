import re
from datetime import date as date_type
from typing import TYPE_CHECKING, Dict, List, Optional

from astro_insights.domain import zodiac
from astro_insights.domain.vedic_schemas import BirthChart, VedicHouse, VedicPlanet

if TYPE_CHECKING:
    from astro_insights.domain.schemas import ChartData


MIN_YEAR = 1900
MAX_YEAR = 2100

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_DATE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_TIME_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


# ─────────────────────────────────────────────
# Birth input normalisation
# ─────────────────────────────────────────────

def normalize_date(raw: str) -> str:
    """
    Normalise a birth date to YYYY-MM-DD.

    Accepts YYYY-MM-DD, DD/MM/YYYY and DD-MM-YYYY.
    Raises ValueError for anything else or for impossible dates.
    """
    value = (raw or "").strip()

    match = _ISO_DATE.match(value)
    if match:
        year, month, day = (int(g) for g in match.groups())
    else:
        match = _DMY_DATE.match(value)
        if not match:
            raise ValueError(f"Unrecognised date format: {raw!r}")
        day, month, year = (int(g) for g in match.groups())

    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")

    return date_type(year, month, day).isoformat()


def normalize_time(raw: str) -> str:
    """
    Normalise a birth time to 24-hour HH:MM.

    Accepts H:MM, HH:MM, HH:MM:SS and h:MM AM/PM.
    """
    value = (raw or "").strip()

    match = _TIME_12H.match(value)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        meridiem = match.group(3).upper()
        if not 1 <= hours <= 12:
            raise ValueError(f"Invalid 12-hour time: {raw!r}")
        if meridiem == "PM" and hours < 12:
            hours += 12
        elif meridiem == "AM" and hours == 12:
            hours = 0
    else:
        match = _TIME_24H.match(value)
        if not match:
            raise ValueError(f"Unrecognised time format: {raw!r}")
        hours, minutes = int(match.group(1)), int(match.group(2))

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time out of range: {raw!r}")

    return f"{hours:02d}:{minutes:02d}"


def provider_datetime(birth_date: str, birth_time: str, utc_offset: str) -> str:
    """
    ISO-8601 datetime with an explicit UTC offset, as the provider expects.
    """
    return f"{birth_date}T{birth_time}:00{utc_offset}"


# ─────────────────────────────────────────────
# ChartData -> display chart
# ─────────────────────────────────────────────

PLANET_COLORS: Dict[str, str] = {
    "Sun": "#E8A87C",
    "Moon": "#D0D6DE",
    "Mercury": "#85CDCA",
    "Venus": "#C38DD9",
    "Mars": "#E27D60",
    "Jupiter": "#E8DE92",
    "Saturn": "#4056A1",
    "Rahu": "#6CA6C1",
    "Ketu": "#FE5F55",
}

BENEFIC_PLANETS = {"Jupiter", "Venus", "Mercury", "Moon"}
MALEFIC_PLANETS = {"Saturn", "Mars", "Rahu", "Ketu", "Sun"}


def house_strength(planets_present: List[str]) -> str:
    """
    Simplified benefic/malefic occupancy score for a house.
    """
    score = 0
    for name in planets_present:
        if name in BENEFIC_PLANETS:
            score += 1
        elif name in MALEFIC_PLANETS:
            score -= 1

    if score >= 2:
        return "strong"
    if score <= -1:
        return "weak"
    return "moderate"


def chart_to_birth_chart(chart: "ChartData", *, moon_nakshatra: Optional[str] = None) -> BirthChart:
    """
    Build the display birth chart from normalised ChartData.
    """
    planets = [
        VedicPlanet(
            id=p.name.lower(),
            name=p.name,
            sign=zodiac.sign_index(p.sign) + 1,
            house=p.house,
            degree=round(p.degree, 2),
            nakshatra=moon_nakshatra if p.name == "Moon" else None,
            is_retrograde=p.is_retrograde,
            color=PLANET_COLORS.get(p.name, "#999999"),
        )
        for p in chart.planets
    ]

    houses = [
        VedicHouse(
            number=h.number,
            sign=zodiac.sign_index(h.sign) + 1,
            sign_name=zodiac.english_name(h.sign),
            lord=h.lord,
            planets=list(h.planets_present),
            strength=house_strength(h.planets_present),
            aspects=[],
        )
        for h in chart.houses
    ]

    return BirthChart(
        ascendant=zodiac.sign_index(chart.ascendant.sign) + 1,
        planets=planets,
        houses=houses,
    )
