"""
Static sample data used whenever live provider or LLM data is unavailable.
"""
from typing import List, Tuple

from astro_insights.domain import zodiac
from astro_insights.domain.schemas import (
    BirthInput,
    ChartData,
    Insight,
    PlanetPlacement,
    Provenance,
    SignPosition,
    houses_from_ascendant,
)
from astro_insights.domain.vedic_schemas import (
    BirthChart,
    DashaPeriod,
    Dashas,
    Dosha,
    VedicChart,
    VedicHouse,
    VedicPlanet,
    Yoga,
)


SAMPLE_DATA_ADVISORY = (
    "Live astrology data is unavailable right now. "
    "You are viewing sample data, not a reading calculated for your birth details."
)

PARTIAL_SAMPLE_ADVISORY = (
    "Some sections of this chart use sample data because live analysis was unavailable."
)

MOCK_INSIGHT_ADVISORY = (
    "The reading service is unavailable right now. "
    "This is a sample reading, not one generated for your chart."
)


# ─────────────────────────────────────────────
# Sample chart data
# ─────────────────────────────────────────────

MOCK_ASCENDANT = "Simha"
MOCK_MOON_SIGN = "Vrishabha"

# (planet, sign, degree, retrograde)
_MOCK_PLACEMENTS: List[Tuple[str, str, float, bool]] = [
    ("Mercury", "Mithuna", 12.4, False),
    ("Venus", "Karka", 3.9, False),
    ("Mars", "Mesha", 21.7, False),
    ("Jupiter", "Dhanu", 8.2, False),
    ("Saturn", "Makara", 27.5, False),
    ("Rahu", "Kumbha", 15.1, True),
    ("Ketu", "Simha", 15.1, True),
]


def mock_chart_data(birth: BirthInput) -> ChartData:
    """
    Sample chart used when the provider cannot be reached.

    Only the sun sign depends on the input (approximated from the
    calendar date); everything else is a fixed Simha-ascendant chart.
    """
    _, month, day = (int(part) for part in birth.date.split("-"))
    sun_sign = zodiac.approximate_sun_sign(month, day)

    placements = [("Sun", sun_sign, 15.0, False), ("Moon", MOCK_MOON_SIGN, 10.0, False)]
    placements += _MOCK_PLACEMENTS

    houses = houses_from_ascendant(
        MOCK_ASCENDANT,
        [(name, sign) for name, sign, _, _ in placements],
    )
    house_of = {h.sign: h.number for h in houses}

    return ChartData(
        sun=SignPosition(sign=sun_sign, degree=15.0),
        moon=SignPosition(sign=MOCK_MOON_SIGN, degree=10.0),
        ascendant=SignPosition(sign=MOCK_ASCENDANT, degree=5.0),
        planets=[
            PlanetPlacement(
                name=name,
                sign=sign,
                degree=degree,
                is_retrograde=retro,
                house=house_of[sign],
            )
            for name, sign, degree, retro in placements
        ],
        houses=houses,
    )


# ─────────────────────────────────────────────
# Sample insight
# ─────────────────────────────────────────────

def mock_insight(birth: BirthInput) -> Insight:
    text = f"""## Birth Details
- Date: {birth.date}
- Time: {birth.time} IST
- Place: {birth.place}

## Ascendant/Lagna
Leo ascendant gives a confident, dignified, and charismatic presence. Natural leadership qualities with a generous and warm-hearted nature.

## Personality Overview
Balanced and justice-seeking with deep emotional sensitivity and natural commanding presence. Strong intuition with connection to ancestral wisdom.

## Key Strengths
1. Natural leadership abilities and creative expression
2. Strong intuitive and emotional intelligence
3. Excellent communication skills and intellectual versatility
4. Philosophical depth and teaching abilities

## Potential Challenges
1. Balancing discipline with spontaneous action
2. Managing emotional intensity and sensitivity
3. Tendency towards perfectionism
4. Need for discernment in spiritual pursuits

## Significant Chart Features
1. Strong Sun position indicating exceptional creative potential
2. Venus-Jupiter beneficial aspect bringing prosperity in relationships
3. Saturn-Mars tension creating productive drive when managed well
4. Moon in an earth sign grounding emotional intelligence
"""
    return Insight(text=text, source=Provenance.MOCK, attempts=0)


# ─────────────────────────────────────────────
# Sample Vedic chart (Aries ascendant)
# ─────────────────────────────────────────────

def _planet(pid, name, sign, degree, nakshatra, retro, color) -> VedicPlanet:
    return VedicPlanet(
        id=pid, name=name, sign=sign, house=sign, degree=degree,
        nakshatra=nakshatra, is_retrograde=retro, color=color,
    )


def _house(number, lord, planets, strength, aspects) -> VedicHouse:
    return VedicHouse(
        number=number,
        sign=number,
        sign_name=zodiac.ENGLISH_SIGNS[number - 1],
        lord=lord,
        planets=planets,
        strength=strength,
        aspects=aspects,
    )


def _period(planet, start, end, sub=None) -> DashaPeriod:
    return DashaPeriod(planet=planet, start_date=start, end_date=end, sub_periods=sub)


_SATURN_ANTARDASHAS = [
    _period("Saturn", "2019-04-12", "2022-04-13"),
    _period("Mercury", "2022-04-13", "2025-01-20"),
    _period("Ketu", "2025-01-20", "2026-03-02"),
    _period("Venus", "2026-03-02", "2029-05-01"),
    _period("Sun", "2029-05-01", "2030-04-14"),
    _period("Moon", "2030-04-14", "2031-11-13"),
    _period("Mars", "2031-11-13", "2033-01-22"),
    _period("Rahu", "2033-01-22", "2035-12-01"),
    _period("Jupiter", "2035-12-01", "2038-04-12"),
]

MOCK_BIRTH_CHART = BirthChart(
    ascendant=1,
    planets=[
        _planet("sun", "Sun", 9, 15.5, "Purva Ashadha", False, "#E8A87C"),
        _planet("moon", "Moon", 4, 8.2, "Pushya", False, "#D0D6DE"),
        _planet("mercury", "Mercury", 9, 5.8, "Moola", False, "#85CDCA"),
        _planet("venus", "Venus", 8, 22.3, "Jyeshtha", False, "#C38DD9"),
        _planet("mars", "Mars", 2, 28.6, "Mrigashira", False, "#E27D60"),
        _planet("jupiter", "Jupiter", 12, 5.1, "Purva Bhadrapada", True, "#E8DE92"),
        _planet("saturn", "Saturn", 10, 18.9, "Shravana", False, "#4056A1"),
        _planet("rahu", "Rahu", 6, 2.5, "Uttara Phalguni", False, "#6CA6C1"),
        _planet("ketu", "Ketu", 12, 2.5, "Uttara Bhadrapada", False, "#FE5F55"),
    ],
    houses=[
        _house(1, "Mars", ["Ascendant"], "strong", ["Saturn aspect", "Jupiter aspect"]),
        _house(2, "Venus", ["Mars"], "moderate", ["Saturn aspect"]),
        _house(3, "Mercury", [], "weak", []),
        _house(4, "Moon", ["Moon"], "strong", ["Mars aspect"]),
        _house(5, "Sun", [], "moderate", []),
        _house(6, "Mercury", ["Rahu"], "moderate", []),
        _house(7, "Venus", [], "weak", ["Mars aspect"]),
        _house(8, "Mars", ["Venus"], "moderate", []),
        _house(9, "Jupiter", ["Sun", "Mercury"], "strong", []),
        _house(10, "Saturn", ["Saturn"], "strong", []),
        _house(11, "Saturn", [], "moderate", []),
        _house(12, "Jupiter", ["Jupiter", "Ketu"], "moderate", []),
    ],
)

MOCK_DASHAS = Dashas(
    current_mahadasha=_period("Saturn", "2019-04-12", "2038-04-12", _SATURN_ANTARDASHAS),
    current_antardasha=_period("Mercury", "2022-04-13", "2025-01-20"),
    sequence=[
        _period("Moon", "2010-07-12", "2019-04-12", [
            _period("Moon", "2010-07-12", "2012-05-12"),
            _period("Mars", "2012-05-12", "2013-12-12"),
            _period("Rahu", "2013-12-12", "2015-06-12"),
            _period("Jupiter", "2015-06-12", "2016-10-12"),
            _period("Saturn", "2016-10-12", "2018-05-12"),
            _period("Mercury", "2018-05-12", "2019-04-12"),
        ]),
        _period("Saturn", "2019-04-12", "2038-04-12", _SATURN_ANTARDASHAS),
        _period("Mercury", "2038-04-12", "2055-04-12", []),
        _period("Ketu", "2055-04-12", "2062-04-12", []),
        _period("Venus", "2062-04-12", "2082-04-12", []),
        _period("Sun", "2082-04-12", "2088-04-12", []),
        _period("Mars", "2088-04-12", "2095-04-12", []),
    ],
)

MOCK_YOGAS = [
    Yoga(
        name="Gajakesari Yoga",
        strength="strong",
        description="Formed by Moon and Jupiter being in angular houses (kendras) from each other. Brings wealth, fame, spiritual growth, and success in education and career.",
        planets=["Moon", "Jupiter"],
        houses=[4, 12],
    ),
    Yoga(
        name="Budha-Aditya Yoga",
        strength="very strong",
        description="Formed by Sun and Mercury conjunction. Grants intelligence, articulate speech, success in education, leadership qualities, and recognition in career.",
        planets=["Sun", "Mercury"],
        houses=[9],
    ),
    Yoga(
        name="Neecha Bhanga Raja Yoga",
        strength="moderate",
        description="A special Raja Yoga formed when a planet in debilitation is influenced by its lord, bringing unexpected success and reversal of adverse conditions.",
        planets=["Venus", "Mars"],
        houses=[8, 2],
    ),
    Yoga(
        name="Pancha Mahapurusha Yoga (Sasha)",
        strength="strong",
        description="One of the five great person yogas, formed when Saturn is in its own sign in an angular house, giving discipline, perseverance, and success through hard work.",
        planets=["Saturn"],
        houses=[10],
    ),
    Yoga(
        name="Dhana Yoga",
        strength="moderate",
        description="A wealth-generating yoga formed when lords of the 5th and 9th houses are in the 11th house or have mutual aspects, creating financial prosperity.",
        planets=["Sun", "Jupiter"],
        houses=[9, 12],
    ),
]

MOCK_DOSHAS = [
    Dosha(
        name="Kuja Dosha (Manglik)",
        severity="moderate",
        description="Mars placed in the 1st, 4th, 7th, 8th, or 12th house can create challenges in marriage and partnerships due to the fiery and aggressive nature of Mars.",
        remedies=[
            "Wearing a red coral gemstone after proper astrological consultation",
            "Reciting Mars mantras like 'Om Angarakaya Namaha'",
            "Performing Mars pacification rituals (Kuja Shanti)",
            "Donating red lentils, jaggery, or copper on Tuesdays",
        ],
        affected_areas=["Marriage", "Partnerships", "Home harmony"],
    ),
    Dosha(
        name="Grahan Yoga (Eclipse Influence)",
        severity="mild",
        description="Formed when Rahu/Ketu are conjunct or closely aspecting Sun or Moon, creating confusion, anxiety, and fluctuations in career and emotional stability.",
        remedies=[
            "Wearing a hessonite (gomed) gemstone for Rahu or cat's eye for Ketu",
            "Performing Navagraha puja (nine planets worship)",
            "Reciting specific mantras for Rahu and Ketu",
            "Donating black sesame seeds, black clothes, or black umbrella",
        ],
        affected_areas=["Mental peace", "Career stability", "Decision-making"],
    ),
    Dosha(
        name="Retrograde Jupiter Influence",
        severity="mild",
        description="Jupiter in retrograde motion can delay the positive results of Jupiter, affecting education, children, wisdom, and spiritual growth.",
        remedies=[
            "Wearing a yellow sapphire (pukhraj) gemstone",
            "Reciting Jupiter mantras like 'Om Gram Greem Graum Sah Gurave Namah'",
            "Reading or listening to spiritual scriptures",
            "Donating yellow items on Thursdays",
        ],
        affected_areas=["Education", "Children", "Spiritual growth"],
    ),
]

MOCK_VEDIC_CHART = VedicChart(
    birth_chart=MOCK_BIRTH_CHART,
    dashas=MOCK_DASHAS,
    yogas=MOCK_YOGAS,
    doshas=MOCK_DOSHAS,
    is_sample=True,
    advisory=SAMPLE_DATA_ADVISORY,
)


def mock_vedic_chart() -> VedicChart:
    """
    A fresh copy of the sample fixture, safe for callers to mutate.
    """
    return MOCK_VEDIC_CHART.model_copy(deep=True)
