"""
Groundwater Forecast Request Logger

Observes a prediction session and logs every state transition.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..config.settings import get_settings
from ..models.request_state import RequestState, RequestStatus


class RequestLogger:
    """
    Transition logger for a prediction session.

    Provides:
    - Console output with formatting
    - Optional file logging
    - Structured log entries
    """

    def __init__(
        self,
        session_id: str = "default",
        log_file: Optional[Path] = None,
        verbose: Optional[bool] = None
    ):
        self.session_id = session_id
        self.settings = get_settings()
        self.verbose = self.settings.verbose_logging if verbose is None else verbose

        # Setup Python logger
        self.logger = logging.getLogger(f"groundwater.session.{session_id}")
        self.logger.setLevel(logging.DEBUG if self.verbose else self.settings.log_level.upper())

        # Clear existing handlers
        self.logger.handlers = []

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%H:%M:%S'
        )
        console_handler.setFormatter(console_format)
        self.logger.addHandler(console_handler)

        # File handler
        self.log_file = log_file
        if log_file is not None:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_format = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
            )
            file_handler.setFormatter(file_format)
            self.logger.addHandler(file_handler)

        # Log entries for structured access
        self.entries: List[Dict[str, Any]] = []

    def attach(self, session) -> Callable[[], None]:
        """Subscribe to a PredictionSession; returns the unsubscribe callable."""
        return session.subscribe(self.log_state)

    def log_state(self, state: RequestState):
        """Log one state transition."""
        data: Dict[str, Any] = {
            "status": state.status.value,
            "retry_attempt": state.retry_attempt,
        }

        if state.status == RequestStatus.LOADING and state.retry_attempt == 0:
            self.logger.info("Forecast request started")
        elif state.status == RequestStatus.LOADING:
            self.logger.warning(f"Connection unstable, retry {state.retry_attempt} scheduled")
        elif state.status == RequestStatus.SUCCESS:
            data["location_name"] = state.data.location_name if state.data else None
            self.logger.info(f"Forecast ready: {data['location_name']}")
            if self.verbose and state.data is not None:
                self.logger.debug(
                    f"  Series: {len(state.data.historical_water_levels)} historical, "
                    f"{len(state.data.predicted_water_levels)} predicted, "
                    f"{len(state.data.rainfall_data)} rainfall"
                )
        elif state.status == RequestStatus.ERROR:
            data["error"] = state.error
            self.logger.error(f"Forecast failed: {state.error}")
        else:
            self.logger.info("Session idle")

        self._log_entry("STATE", data)

    def _log_entry(self, entry_type: str, data: dict):
        """Add structured log entry."""
        entry = {
            "type": entry_type,
            "timestamp": datetime.now().isoformat(),
            "data": data
        }
        self.entries.append(entry)

    def get_structured_log(self) -> list:
        """Get all log entries as structured data."""
        return self.entries
