"""
Groundwater Forecast Data Schemas

Pydantic models for the prediction request and the validated report.
Report models are frozen and use snake_case attributes with the camelCase
aliases of the remote response shape.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class WaterCondition(str, Enum):
    """Qualitative band derived from the current water level score."""
    SAFE = "Safe"
    MODERATE = "Moderate"
    DANGER = "Danger"


def condition_for_score(score: float) -> WaterCondition:
    """Classify a 0-100 water level score."""
    if score >= 70:
        return WaterCondition.SAFE
    if score >= 40:
        return WaterCondition.MODERATE
    return WaterCondition.DANGER


class _WireModel(BaseModel):
    """Base for report models: immutable, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Request Schemas
# ============================================================================

class Coordinates(BaseModel):
    """A WGS84 latitude/longitude pair."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class AdvisoryData(BaseModel):
    """
    Optional user-supplied facts that bias the forecast prompt.
    They never address the request on their own.
    """
    model_config = ConfigDict(frozen=True)

    rainfall_mm: Optional[float] = Field(None, ge=0, description="Average annual rainfall in mm")
    soil_type: Optional[str] = None
    population_density: Optional[float] = Field(None, ge=0, description="People per square kilometer")

    @field_validator("soil_type")
    @classmethod
    def _blank_soil_is_absent(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_empty(self) -> bool:
        return self.rainfall_mm is None and self.soil_type is None and self.population_density is None


class PredictionRequest(BaseModel):
    """
    One user-initiated forecast ask.

    Exactly one of ``location`` or ``coordinates`` addresses the request.
    """
    model_config = ConfigDict(frozen=True)

    location: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    advisory: Optional[AdvisoryData] = None

    @field_validator("location")
    @classmethod
    def _strip_location(cls, v):
        if v is None:
            return None
        return v.strip()

    @model_validator(mode="after")
    def _exactly_one_address(self):
        has_location = self.location is not None
        has_coordinates = self.coordinates is not None
        if has_location and not self.location:
            raise ValueError("location must be non-empty")
        if has_location == has_coordinates:
            raise ValueError("Either location or coordinates must be provided, not both")
        return self

    @property
    def is_coordinate_request(self) -> bool:
        return self.coordinates is not None


# ============================================================================
# Report Schemas
# ============================================================================

class Metric(_WireModel):
    value: str
    score: float = Field(..., description="0-100 impact score")


KEY_METRIC_DISPLAY_NAMES = {
    "avgAnnualRainfall": "Rainfall",
    "dominantSoilType": "Soil Type",
    "populationDensity": "Population",
    "keyGeologicalFormation": "Geology",
}


class KeyMetrics(_WireModel):
    avg_annual_rainfall: Metric
    dominant_soil_type: Metric
    population_density: Metric
    key_geological_formation: Metric

    def items(self) -> Tuple[Tuple[str, Metric], ...]:
        """(attribute name, metric) pairs in display order."""
        return tuple((name, getattr(self, name)) for name in type(self).model_fields)


class WaterLevelIndex(_WireModel):
    score: float
    condition: Optional[str] = None

    @property
    def band(self) -> WaterCondition:
        return condition_for_score(self.score)


class YearScore(_WireModel):
    year: int
    score: float = Field(..., description="Water level score for that year, 0-100")


class RainfallPoint(_WireModel):
    year: int
    rainfall: float = Field(..., description="Total annual rainfall in millimeters")


class Recommendation(_WireModel):
    title: str
    description: str


class Scenarios(_WireModel):
    most_likely: str
    optimistic: str
    pessimistic: str


class Outlook(_WireModel):
    confidence: str
    confidence_score: float
    key_factors: str
    scenarios: Scenarios


class OutlookReport(_WireModel):
    core_factors: str
    short_term: Outlook
    long_term: Outlook
    conclusion: str


class PredictionReport(_WireModel):
    """The validated, logically consistent forecast handed to presentation."""
    location_name: str
    coordinates: Coordinates
    key_metrics: KeyMetrics
    current_water_level_index: WaterLevelIndex
    historical_water_levels: Tuple[YearScore, ...]
    predicted_water_levels: Tuple[YearScore, ...]
    rainfall_data: Tuple[RainfallPoint, ...]
    recommendations: Tuple[Recommendation, ...]
    report: OutlookReport

    def to_payload(self) -> Dict[str, Any]:
        """Serialize back to the camelCase response shape."""
        return self.model_dump(by_alias=True, mode="json")
