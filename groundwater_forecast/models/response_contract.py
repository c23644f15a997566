"""
Groundwater Forecast Response Contract

The JSON schema sent with every request to constrain the model's output,
and the list of fields a decoded response must carry to count as complete.
"""

from typing import Any, Dict, Tuple

RESPONSE_SCHEMA_NAME = "groundwater_prediction"

_METRIC = {
    "type": "object",
    "properties": {
        "value": {"type": "string", "description": "The qualitative value of the metric (e.g., 'Sandy Loam')."},
        "score": {"type": "number", "description": "A quantitative score from 0-100 representing the metric's impact."},
    },
    "required": ["value", "score"],
}

_SCENARIOS = {
    "type": "object",
    "properties": {
        "mostLikely": {"type": "string"},
        "optimistic": {"type": "string"},
        "pessimistic": {"type": "string"},
    },
    "required": ["mostLikely", "optimistic", "pessimistic"],
}

_OUTLOOK = {
    "type": "object",
    "properties": {
        "confidence": {"type": "string", "description": "Confidence level: 'High', 'Medium', or 'Low'."},
        "confidenceScore": {"type": "number", "description": "A numerical confidence score from 0-100."},
        "keyFactors": {"type": "string"},
        "scenarios": _SCENARIOS,
    },
    "required": ["confidence", "confidenceScore", "keyFactors", "scenarios"],
}

_YEAR_SCORES = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "year": {"type": "number"},
            "score": {"type": "number", "description": "Water level score for that year, 0-100."},
        },
        "required": ["year", "score"],
    },
}

_RAINFALL = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "year": {"type": "number"},
            "rainfall": {"type": "number", "description": "Total annual rainfall in millimeters (mm)."},
        },
        "required": ["year", "rainfall"],
    },
}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "locationName": {"type": "string"},
        "coordinates": {
            "type": "object",
            "properties": {"lat": {"type": "number"}, "lon": {"type": "number"}},
            "required": ["lat", "lon"],
        },
        "currentWaterLevelIndex": {
            "type": "object",
            "properties": {
                "score": {"type": "number", "description": "Current water level score, 0-100."},
                "condition": {"type": "string", "description": "'Safe', 'Moderate', or 'Danger'."},
            },
            "required": ["score", "condition"],
        },
        "keyMetrics": {
            "type": "object",
            "properties": {
                "avgAnnualRainfall": _METRIC,
                "dominantSoilType": _METRIC,
                "populationDensity": _METRIC,
                "keyGeologicalFormation": _METRIC,
            },
            "required": ["avgAnnualRainfall", "dominantSoilType", "populationDensity", "keyGeologicalFormation"],
        },
        "historicalWaterLevels": _YEAR_SCORES,
        "predictedWaterLevels": _YEAR_SCORES,
        "rainfallData": _RAINFALL,
        "recommendations": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"title": {"type": "string"}, "description": {"type": "string"}},
                "required": ["title", "description"],
            },
        },
        "report": {
            "type": "object",
            "properties": {
                "coreFactors": {"type": "string"},
                "shortTerm": _OUTLOOK,
                "longTerm": _OUTLOOK,
                "conclusion": {"type": "string"},
            },
            "required": ["coreFactors", "shortTerm", "longTerm", "conclusion"],
        },
    },
    "required": [
        "coordinates", "keyMetrics", "currentWaterLevelIndex", "historicalWaterLevels",
        "predictedWaterLevels", "rainfallData", "recommendations", "report",
    ],
}

# Top-level fields a decoded response must carry (present and non-null).
REQUIRED_FIELDS: Tuple[str, ...] = (
    "locationName",
    "coordinates",
    "keyMetrics",
    "currentWaterLevelIndex",
    "historicalWaterLevels",
    "predictedWaterLevels",
    "rainfallData",
    "recommendations",
    "report",
)

# Nested under "report"; both horizons must be present.
REQUIRED_REPORT_FIELDS: Tuple[str, ...] = ("shortTerm", "longTerm")


def response_format() -> Dict[str, Any]:
    """OpenAI ``response_format`` payload for structured output."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": RESPONSE_SCHEMA_NAME,
            "schema": RESPONSE_SCHEMA,
            # locationName is optional in the schema, which strict mode forbids
            "strict": False,
        },
    }
