"""Core processing modules for the groundwater forecast pipeline."""

from .errors import ErrorKind, ForecastError
from .prompt_builder import build_prediction_prompt
from .sanitizer import sanitize_prediction
from .orchestrator import ForecastOrchestrator
from .session import PredictionSession
from .progress import LoadingNarrator

__all__ = [
    "ErrorKind",
    "ForecastError",
    "build_prediction_prompt",
    "sanitize_prediction",
    "ForecastOrchestrator",
    "PredictionSession",
    "LoadingNarrator",
]
