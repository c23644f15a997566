"""
Groundwater Forecast Prompt Builder

Composes the user prompt for a prediction request.
"""

from typing import List

from ..models.schemas import AdvisoryData, PredictionRequest
from .errors import InvalidRequest

BASE_PROMPT = (
    "Generate a detailed groundwater forecast, prioritizing data from official government "
    "meteorological and geological survey sources. Ensure all time-series data "
    "(historicalWaterLevels, predictedWaterLevels, rainfallData) is sorted chronologically by "
    "year. Crucially, the 'predictedWaterLevels' array must start exactly one year after the "
    "final year in 'historicalWaterLevels'. The 'rainfallData' array must correspond to the "
    "same years as the 'historicalWaterLevels' data. All scores must be between 0 and 100. "
    "The 'conclusion' field must be a concise summary formatted as a markdown bulleted list "
    "(e.g., using '-' or '*'). Each point should highlight a key takeaway from the analysis."
)


def _format_number(value: float) -> str:
    return f"{value:g}"


def build_advisory_clause(advisory: AdvisoryData) -> str:
    """Sentence folding user-supplied facts in as overrides; empty if none."""
    if advisory is None or advisory.is_empty:
        return ""
    parts: List[str] = []
    if advisory.rainfall_mm is not None:
        parts.append(f"average annual rainfall of {_format_number(advisory.rainfall_mm)} mm")
    if advisory.soil_type:
        parts.append(f"a dominant soil type of '{advisory.soil_type}'")
    if advisory.population_density is not None:
        parts.append(
            f"a population density of {_format_number(advisory.population_density)} "
            "people per square kilometer"
        )
    return (
        " Use the following user-provided data as a primary source for your analysis, "
        f"overriding general data where specified: {', '.join(parts)}."
    )


def build_prediction_prompt(request: PredictionRequest) -> str:
    """Build the prompt text for one prediction request."""
    advisory_clause = build_advisory_clause(request.advisory)

    if request.location:
        return f'{BASE_PROMPT} The location is: "{request.location}".{advisory_clause}'
    if request.coordinates is not None:
        coords = request.coordinates
        return (
            f"{BASE_PROMPT} The coordinates are lat: {coords.lat}, lon: {coords.lon}. "
            f"Include a 'locationName' in the response.{advisory_clause}"
        )
    raise InvalidRequest("Either location or coordinates must be provided.")
