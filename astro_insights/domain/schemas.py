from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from astro_insights.domain import zodiac
from astro_insights.domain.converters import normalize_date, normalize_time
from astro_insights.domain.errors import UserInputError


# ─────────────────────────────────────────────
# Birth input
# ─────────────────────────────────────────────

class BirthInput(BaseModel):
    """
    Immutable, validated birth details submitted by the user.

    Date and time are normalised on construction, so two inputs that
    describe the same moment share a cache identity.
    """
    model_config = ConfigDict(frozen=True)

    date: str
    time: str
    place: str = Field(..., min_length=2, max_length=120)
    name: str = Field("", max_length=100)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> str:
        return normalize_date(str(value))

    @field_validator("time", mode="before")
    @classmethod
    def _normalize_time(cls, value: Any) -> str:
        return normalize_time(str(value))

    @field_validator("place", "name", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return str(value or "").strip()

    @classmethod
    def create(cls, data: Mapping[str, Any] | None = None, **fields: Any) -> "BirthInput":
        """
        Build a BirthInput, raising UserInputError instead of
        pydantic's ValidationError.
        """
        payload = {**(data or {}), **fields}
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}"
                for err in exc.errors()
            )
            raise UserInputError(f"Invalid birth details: {problems}") from exc

    @property
    def identity(self) -> Tuple[str, str, str]:
        return (self.date, self.time, self.place)


# ─────────────────────────────────────────────
# Provider-side atoms
# ─────────────────────────────────────────────

class Coordinates(BaseModel):
    """
    A resolved latitude/longitude pair.
    """
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def as_param(self) -> str:
        """
        The provider's "lat,lon" coordinate string.
        """
        return f"{self.latitude:.4f},{self.longitude:.4f}"


class AuthToken(BaseModel):
    """
    Bearer credential for the data provider.
    """
    model_config = ConfigDict(frozen=True)

    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


# ─────────────────────────────────────────────
# Normalised chart data
# ─────────────────────────────────────────────

class SignPosition(BaseModel):
    sign: str
    degree: float = 0.0


class PlanetPlacement(BaseModel):
    """
    A single planet's placement in the D1 chart.
    """
    name: str
    sign: str
    degree: float
    is_retrograde: bool = False
    house: int = Field(..., ge=1, le=12)


class House(BaseModel):
    number: int = Field(..., ge=1, le=12)
    sign: str
    lord: str
    planets_present: List[str] = Field(default_factory=list)


class KundliDetails(BaseModel):
    """
    Summary of the provider's kundli response.
    """
    nakshatra: Optional[str] = None
    nakshatra_lord: Optional[str] = None
    chandra_rasi: Optional[str] = None
    soorya_rasi: Optional[str] = None
    mangal_dosha: Optional[bool] = None
    mangal_dosha_description: Optional[str] = None
    yogas: List[str] = Field(default_factory=list)


class ChartData(BaseModel):
    """
    Normalised birth chart merged from the planet-position,
    kundli and chart responses.

    Invariants:
    - the ascendant sign is one of the 12 canonical signs
    - houses, when present, are exactly 12 and follow the sign order
      starting from the ascendant sign
    """
    sun: SignPosition
    moon: SignPosition
    ascendant: SignPosition
    planets: List[PlanetPlacement] = Field(default_factory=list)
    houses: List[House] = Field(default_factory=list)
    kundli: Optional[KundliDetails] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "ChartData":
        if zodiac.normalize_sign(self.ascendant.sign) != self.ascendant.sign:
            raise ValueError(f"Ascendant sign is not canonical: {self.ascendant.sign!r}")

        if self.houses:
            if len(self.houses) != 12:
                raise ValueError(f"Expected 12 houses, got {len(self.houses)}")

            expected = zodiac.rotate_signs(self.ascendant.sign)
            for position, house in enumerate(self.houses):
                if house.number != position + 1:
                    raise ValueError("Houses must be numbered 1..12 in order")
                if house.sign != expected[position]:
                    raise ValueError(
                        f"House {house.number} sign {house.sign!r} does not follow "
                        f"ascendant {self.ascendant.sign!r}"
                    )

        return self

    def house(self, number: int) -> House:
        return self.houses[number - 1]


def houses_from_ascendant(
    ascendant_sign: str,
    occupants: List[tuple[str, str]],
) -> List[House]:
    """
    Whole-sign houses for an ascendant.

    `occupants` is a list of (planet name, canonical sign) pairs;
    each planet is listed in the house holding its sign.
    """
    houses: List[House] = []
    for position, sign in enumerate(zodiac.rotate_signs(ascendant_sign)):
        houses.append(
            House(
                number=position + 1,
                sign=sign,
                lord=zodiac.lord_of(sign),
                planets_present=[name for name, p_sign in occupants if p_sign == sign],
            )
        )
    return houses


# ─────────────────────────────────────────────
# Insight
# ─────────────────────────────────────────────

class Provenance(str, Enum):
    LIVE = "live"
    MOCK = "mock"


class Insight(BaseModel):
    """
    Natural-language reading with its provenance.
    """
    text: str
    source: Provenance = Provenance.LIVE
    attempts: int = 0


class InsightPayload(BaseModel):
    insight: str
    source: Provenance
    sections: List[Dict[str, str]] = Field(default_factory=list)
    advisory: Optional[str] = None


class InsightResponse(BaseModel):
    """
    UI-facing result of get_astrology_insight.
    """
    success: bool
    data: Optional[InsightPayload] = None
    error: Optional[str] = None
