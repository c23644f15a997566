"""Models module for groundwater forecast data structures."""

from .schemas import (
    AdvisoryData,
    Coordinates,
    KEY_METRIC_DISPLAY_NAMES,
    PredictionReport,
    PredictionRequest,
    WaterCondition,
    condition_for_score,
)
from .request_state import RequestState, RequestStatus, transition
from .response_contract import REQUIRED_FIELDS, RESPONSE_SCHEMA

__all__ = [
    "AdvisoryData",
    "Coordinates",
    "KEY_METRIC_DISPLAY_NAMES",
    "PredictionReport",
    "PredictionRequest",
    "WaterCondition",
    "condition_for_score",
    "RequestState",
    "RequestStatus",
    "transition",
    "REQUIRED_FIELDS",
    "RESPONSE_SCHEMA",
]
