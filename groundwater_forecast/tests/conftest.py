import copy
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from groundwater_forecast.config.settings import reload_settings


def _outlook(score):
    return {
        "confidence": "Medium",
        "confidenceScore": score,
        "keyFactors": "Monsoon variability and irrigation draw.",
        "scenarios": {
            "mostLikely": "Gradual decline.",
            "optimistic": "Stable levels.",
            "pessimistic": "Sharp decline.",
        },
    }


BASE_CANDIDATE = {
    "locationName": "Pune, India",
    "coordinates": {"lat": 18.52, "lon": 73.86},
    "keyMetrics": {
        "avgAnnualRainfall": {"value": "722 mm", "score": 55},
        "dominantSoilType": {"value": "Black cotton soil", "score": 40},
        "populationDensity": {"value": "5,600 /km²", "score": 25},
        "keyGeologicalFormation": {"value": "Deccan Traps basalt", "score": 35},
    },
    "currentWaterLevelIndex": {"score": 48, "condition": "Moderate"},
    "historicalWaterLevels": [
        {"year": 2018, "score": 60},
        {"year": 2019, "score": 58},
        {"year": 2020, "score": 55},
        {"year": 2021, "score": 52},
        {"year": 2022, "score": 50},
    ],
    "predictedWaterLevels": [
        {"year": 2023, "score": 48},
        {"year": 2024, "score": 46},
        {"year": 2025, "score": 44},
    ],
    "rainfallData": [
        {"year": 2018, "rainfall": 700},
        {"year": 2019, "rainfall": 810},
        {"year": 2020, "rainfall": 690},
        {"year": 2021, "rainfall": 760},
        {"year": 2022, "rainfall": 720},
    ],
    "recommendations": [
        {"title": "Recharge pits", "description": "Build recharge pits in residential areas."},
    ],
    "report": {
        "coreFactors": "Basalt aquifers with low storage.",
        "shortTerm": _outlook(70),
        "longTerm": _outlook(45),
        "conclusion": "- Levels are declining\n- Recharge is needed",
    },
}


@pytest.fixture
def candidate():
    """A fresh, valid decoded response that tests may modify freely."""
    return copy.deepcopy(BASE_CANDIDATE)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    return reload_settings()
