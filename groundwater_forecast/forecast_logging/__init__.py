"""Logging modules for the groundwater forecast core (named forecast_logging to avoid stdlib conflict)."""

from .execution_logger import RequestLogger

__all__ = ["RequestLogger"]
