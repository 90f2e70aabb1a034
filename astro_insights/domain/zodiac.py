from typing import Dict, List, Optional


# Canonical (Sanskrit) sign order used by the data provider. Index 0 = Mesha.
SIGNS: List[str] = [
    "Mesha", "Vrishabha", "Mithuna", "Karka",
    "Simha", "Kanya", "Tula", "Vrischika",
    "Dhanu", "Makara", "Kumbha", "Meena",
]

ENGLISH_SIGNS: List[str] = [
    "Aries", "Taurus", "Gemini", "Cancer",
    "Leo", "Virgo", "Libra", "Scorpio",
    "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

SIGN_LORDS: List[str] = [
    "Mars", "Venus", "Mercury", "Moon",
    "Sun", "Mercury", "Venus", "Mars",
    "Jupiter", "Saturn", "Saturn", "Jupiter",
]

_ALIASES: Dict[str, str] = {
    "vrishchika": "Vrischika",
    "vruschika": "Vrischika",
    "karkata": "Karka",
    "karkataka": "Karka",
    "kark": "Karka",
    "meenam": "Meena",
    "mina": "Meena",
    "vrishabh": "Vrishabha",
    "vrushabha": "Vrishabha",
    "mithun": "Mithuna",
    "singh": "Simha",
    "kanni": "Kanya",
    "thula": "Tula",
    "dhanus": "Dhanu",
    "makar": "Makara",
    "kumbh": "Kumbha",
    "mesh": "Mesha",
}

_LOOKUP: Dict[str, str] = {
    **{s.lower(): s for s in SIGNS},
    **{e.lower(): s for e, s in zip(ENGLISH_SIGNS, SIGNS)},
    **_ALIASES,
}


def normalize_sign(name: Optional[str]) -> Optional[str]:
    """
    Map a sign name in any supported spelling to its canonical name.
    Returns None for unknown names.
    """
    if not name:
        return None
    return _LOOKUP.get(name.strip().lower())


def sign_index(name: str) -> int:
    """
    0-based index of a sign. Raises ValueError for unknown signs.
    """
    canonical = normalize_sign(name)
    if canonical is None:
        raise ValueError(f"Unknown zodiac sign: {name!r}")
    return SIGNS.index(canonical)


def rotate_signs(ascendant_sign: str) -> List[str]:
    """
    House signs 1..12 for the given ascendant.

    House 1 holds the ascendant sign and each following house
    holds the next sign, wrapping modulo 12.
    """
    start = sign_index(ascendant_sign)
    return [SIGNS[(start + i) % 12] for i in range(12)]


def lord_of(sign: str) -> str:
    return SIGN_LORDS[sign_index(sign)]


def english_name(sign: str) -> str:
    return ENGLISH_SIGNS[sign_index(sign)]


def approximate_sun_sign(month: int, day: int) -> str:
    """
    Tropical sun sign by calendar date, in canonical naming.
    Only used when no live chart data is available.
    """
    boundaries = [
        (1, 20, "Makara"), (2, 19, "Kumbha"), (3, 21, "Meena"),
        (4, 20, "Mesha"), (5, 21, "Vrishabha"), (6, 21, "Mithuna"),
        (7, 23, "Karka"), (8, 23, "Simha"), (9, 23, "Kanya"),
        (10, 23, "Tula"), (11, 22, "Vrischika"), (12, 22, "Dhanu"),
    ]
    for b_month, b_day, previous in boundaries:
        if month == b_month:
            if day < b_day:
                return previous
            return SIGNS[(SIGNS.index(previous) + 1) % 12]
    raise ValueError(f"Invalid month: {month}")
