"""
Groundwater Forecast Core

Requests a structured groundwater forecast from a remote model for a place
name or a coordinate pair, and turns the raw output into a validated,
internally consistent report.

Architecture:
    PredictionSession → ForecastOrchestrator → LLMClient → validate → sanitize
    └── retriable failure: exponential backoff, up to 3 attempts ──┘
"""

__version__ = "1.0.0"
__author__ = "Groundwater Forecast Development Team"
__description__ = "Groundwater forecast request orchestration and response integrity"

from .core.session import PredictionSession
from .core.orchestrator import ForecastOrchestrator
from .core.errors import ErrorKind, ForecastError
from .models.request_state import RequestState, RequestStatus
from .models.schemas import PredictionReport, PredictionRequest

__all__ = [
    "PredictionSession",
    "ForecastOrchestrator",
    "ErrorKind",
    "ForecastError",
    "RequestState",
    "RequestStatus",
    "PredictionReport",
    "PredictionRequest",
]
