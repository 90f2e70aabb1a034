from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Display model for the Vedic dashboard.
# Field aliases follow the camelCase JSON the dashboard and the
# LLM prompt use; Python code works with the snake_case names.
# ─────────────────────────────────────────────

class _DisplayModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VedicPlanet(_DisplayModel):
    id: str
    name: str
    sign: int = Field(..., ge=1, le=12)
    house: int = Field(..., ge=1, le=12)
    degree: float
    nakshatra: Optional[str] = None
    is_retrograde: bool = Field(False, alias="isRetrograde")
    color: str = "#999999"


class VedicHouse(_DisplayModel):
    number: int = Field(..., ge=1, le=12)
    sign: int = Field(..., ge=1, le=12)
    sign_name: str = Field(..., alias="signName")
    lord: str
    planets: List[str] = Field(default_factory=list)
    strength: Literal["weak", "moderate", "strong"] = "moderate"
    aspects: List[str] = Field(default_factory=list)


class BirthChart(_DisplayModel):
    ascendant: int = Field(..., ge=1, le=12)
    planets: List[VedicPlanet]
    houses: List[VedicHouse]


class Yoga(_DisplayModel):
    name: str
    strength: Literal["weak", "moderate", "strong", "very strong"] = "moderate"
    description: str = ""
    planets: List[str] = Field(default_factory=list)
    houses: List[int] = Field(default_factory=list)


class Dosha(_DisplayModel):
    name: str
    severity: Literal["mild", "moderate", "severe"] = "mild"
    description: str = ""
    remedies: List[str] = Field(default_factory=list)
    affected_areas: List[str] = Field(default_factory=list, alias="affectedAreas")


class DashaPeriod(_DisplayModel):
    planet: str
    start_date: str = Field(..., alias="startDate")
    end_date: str = Field(..., alias="endDate")
    sub_periods: Optional[List["DashaPeriod"]] = Field(None, alias="subPeriods")


class Dashas(_DisplayModel):
    current_mahadasha: DashaPeriod = Field(..., alias="currentMahadasha")
    current_antardasha: DashaPeriod = Field(..., alias="currentAntardasha")
    sequence: List[DashaPeriod] = Field(default_factory=list)


class YogasDoshas(_DisplayModel):
    yogas: List[Yoga] = Field(default_factory=list)
    doshas: List[Dosha] = Field(default_factory=list)


class VedicChart(_DisplayModel):
    """
    Chart, dasha, yoga and dosha data rendered by the dashboard.

    is_sample is True when the whole chart is the static sample
    fixture; advisory explains any sample-data substitution.
    """
    birth_chart: BirthChart = Field(..., alias="birthChart")
    dashas: Dashas
    yogas: List[Yoga] = Field(default_factory=list)
    doshas: List[Dosha] = Field(default_factory=list)
    is_sample: bool = Field(False, alias="isSample")
    advisory: Optional[str] = None


DashaPeriod.model_rebuild()
