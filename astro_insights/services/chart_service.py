import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from astro_insights.domain import zodiac
from astro_insights.domain.converters import provider_datetime
from astro_insights.domain.errors import AstroInsightsError, ChartFetchError
from astro_insights.domain.schemas import (
    AuthToken,
    BirthInput,
    ChartData,
    Coordinates,
    House,
    KundliDetails,
    PlanetPlacement,
    SignPosition,
    houses_from_ascendant,
)
from astro_insights.services.provider_client import ProkeralaClient

logger = logging.getLogger(__name__)


class ChartFetcher:
    """
    Gathers planet-position, kundli and chart data for a birth moment
    and merges them into one ChartData.

    The three requests run concurrently. Any failure fails the whole
    fetch; callers never see a partial chart.
    """

    def __init__(self, client: ProkeralaClient):
        self.client = client
        self.config = client.config

    async def fetch_chart(
        self,
        birth: BirthInput,
        coordinates: Coordinates,
        token: AuthToken,
    ) -> ChartData:
        base_params = {
            "datetime": provider_datetime(birth.date, birth.time, self.config.utc_offset),
            "coordinates": coordinates.as_param(),
            "ayanamsa": self.config.ayanamsa,
        }
        chart_params = {
            **base_params,
            "chart_type": self.config.chart_type,
            "chart_style": self.config.chart_style,
        }

        logger.debug(f"Fetching chart data: {base_params}")
        results = await asyncio.gather(
            self.client.get("planet_position", base_params, token),
            self.client.get("kundli", base_params, token),
            self.client.get("chart", chart_params, token),
            return_exceptions=True,
        )

        names = ("planet-position", "kundli", "chart")
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(f"Chart fetch failed at {name}: {result}")
                if isinstance(result, (AstroInsightsError, ValueError)):
                    raise ChartFetchError(f"{name} request failed: {result}") from result
                raise result

        planet_data, kundli_data, chart_data = results
        return merge_chart(planet_data, kundli_data, chart_data)


# ─────────────────────────────────────────────
# Normalisation
# ─────────────────────────────────────────────

def merge_chart(
    planet_data: Dict[str, Any],
    kundli_data: Optional[Dict[str, Any]],
    chart_data: Optional[Dict[str, Any]],
) -> ChartData:
    """
    Merge the three provider payloads into ChartData.

    - sun, moon and ascendant come from the planet positions
      (the chart payload may supply the ascendant instead)
    - houses come from the chart payload when it carries 12 houses that
      agree with the ascendant; otherwise they are rotated from it
    """
    bodies = planet_data.get("planet_position") or []
    if not isinstance(bodies, list) or not bodies:
        raise ChartFetchError("Planet-position response has no planets")

    try:
        parsed = [_parse_body(b) for b in bodies]
        asc_raw = next((p for p in parsed if p["name"] == "Ascendant"), None)
        if asc_raw is None:
            asc_raw = _ascendant_from_chart(chart_data or {})
    except (ValueError, TypeError, AttributeError) as exc:
        raise ChartFetchError(f"Malformed planet-position payload: {exc}") from exc

    planets_raw = [p for p in parsed if p["name"] != "Ascendant"]
    if asc_raw is None or asc_raw["sign"] is None:
        raise ChartFetchError("Could not determine a canonical ascendant sign")

    for p in planets_raw:
        if p["sign"] is None:
            raise ChartFetchError(f"Planet {p['name']} has an unknown sign")

    ascendant_sign = asc_raw["sign"]
    occupants = [(p["name"], p["sign"]) for p in planets_raw]

    houses = _houses_from_chart(chart_data or {}, ascendant_sign, occupants)
    if houses is None:
        houses = houses_from_ascendant(ascendant_sign, occupants)

    house_of = {h.sign: h.number for h in houses}

    planets = [
        PlanetPlacement(
            name=p["name"],
            sign=p["sign"],
            degree=p["degree"],
            is_retrograde=p["is_retrograde"],
            house=house_of[p["sign"]],
        )
        for p in planets_raw
    ]

    sun = next((p for p in planets if p.name == "Sun"), None)
    moon = next((p for p in planets if p.name == "Moon"), None)
    if sun is None or moon is None:
        raise ChartFetchError("Planet-position response is missing the Sun or Moon")

    try:
        return ChartData(
            sun=SignPosition(sign=sun.sign, degree=sun.degree),
            moon=SignPosition(sign=moon.sign, degree=moon.degree),
            ascendant=SignPosition(sign=ascendant_sign, degree=asc_raw["degree"]),
            planets=planets,
            houses=houses,
            kundli=_parse_kundli(kundli_data),
        )
    except ValidationError as exc:
        raise ChartFetchError(f"Merged chart violates chart invariants: {exc}") from exc


def _parse_body(body: Dict[str, Any]) -> Dict[str, Any]:
    rasi = body.get("rasi") or {}
    degree = body.get("degree")
    if degree is None and body.get("longitude") is not None:
        degree = float(body["longitude"]) % 30
    return {
        "name": str(body.get("name", "")),
        "sign": zodiac.normalize_sign(rasi.get("name") if isinstance(rasi, dict) else str(rasi)),
        "degree": float(degree or 0.0),
        "is_retrograde": bool(body.get("is_retrograde", False)),
    }


def _ascendant_from_chart(chart_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for key in ("ascendant", "lagna"):
        node = chart_data.get(key)
        if isinstance(node, dict):
            parsed = _parse_body({**node, "name": "Ascendant"})
            if parsed["sign"] is not None:
                return parsed
    return None


def _houses_from_chart(
    chart_data: Dict[str, Any],
    ascendant_sign: str,
    occupants: List[tuple[str, str]],
) -> Optional[List[House]]:
    """
    Use the chart payload's house list when it is complete and
    consistent with the ascendant; otherwise return None.
    """
    raw_houses = chart_data.get("houses")
    if not isinstance(raw_houses, list) or len(raw_houses) != 12:
        return None

    expected = zodiac.rotate_signs(ascendant_sign)
    houses: List[House] = []
    for position, raw in enumerate(raw_houses):
        if not isinstance(raw, dict):
            return None
        number = raw.get("number", raw.get("id"))
        rasi = raw.get("rasi")
        sign = zodiac.normalize_sign(rasi.get("name") if isinstance(rasi, dict) else raw.get("sign"))
        if number != position + 1 or sign != expected[position]:
            logger.warning("Chart payload houses disagree with the ascendant; rotating instead")
            return None
        houses.append(
            House(
                number=number,
                sign=sign,
                lord=zodiac.lord_of(sign),
                planets_present=[name for name, p_sign in occupants if p_sign == sign],
            )
        )
    return houses


def _parse_kundli(kundli_data: Optional[Dict[str, Any]]) -> Optional[KundliDetails]:
    if not kundli_data:
        return None

    details = kundli_data.get("nakshatra_details") or {}
    nakshatra = details.get("nakshatra") or {}
    mangal = kundli_data.get("mangal_dosha") or {}
    yogas = kundli_data.get("yoga_details") or []

    def _name(node: Any) -> Optional[str]:
        return node.get("name") if isinstance(node, dict) else None

    return KundliDetails(
        nakshatra=_name(nakshatra),
        nakshatra_lord=_name(nakshatra.get("lord")) if isinstance(nakshatra, dict) else None,
        chandra_rasi=zodiac.normalize_sign(_name(details.get("chandra_rasi"))),
        soorya_rasi=zodiac.normalize_sign(_name(details.get("soorya_rasi"))),
        mangal_dosha=mangal.get("has_dosha") if isinstance(mangal, dict) else None,
        mangal_dosha_description=mangal.get("description") if isinstance(mangal, dict) else None,
        yogas=[y["name"] for y in yogas if isinstance(y, dict) and y.get("name")],
    )
