"""
Groundwater Forecast Session

The inbound surface used by a UI layer. A session owns the single live
RequestState, replaces it atomically on every event and notifies observers
with each new value.

Every submit, reset or forced error starts a new generation. Events from an
older generation are dropped, so a request abandoned with cancel_to_idle()
can finish in the background without touching the state.
"""

import logging
import threading
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..models.request_state import (
    IDLE_STATE,
    FetchFailed,
    RequestEvent,
    RequestState,
    Reset,
    transition,
)
from ..models.schemas import AdvisoryData, PredictionReport, PredictionRequest
from .errors import InvalidRequest
from .orchestrator import ForecastOrchestrator

logger = logging.getLogger("groundwater.session")

Observer = Callable[[RequestState], None]
AdvisoryInput = Optional[Union[AdvisoryData, Mapping[str, Any]]]


class PredictionSession:
    """
    Holds the state of one user's forecast requests.

    Usage:
        session = PredictionSession()
        session.subscribe(render)
        session.submit_by_location("Pune, India", {"rainfall_mm": 700})
    """

    def __init__(self, orchestrator: Optional[ForecastOrchestrator] = None):
        self.orchestrator = orchestrator or ForecastOrchestrator()
        self._lock = threading.RLock()
        self._state: RequestState = IDLE_STATE
        self._generation = 0
        self._observers: List[Observer] = []

    @property
    def state(self) -> RequestState:
        with self._lock:
            return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _apply(self, event: RequestEvent, generation: Optional[int] = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"Dropping {type(event).__name__} from superseded request")
                return False
            new_state = transition(self._state, event)
            if new_state is self._state:
                return False
            self._state = new_state
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(new_state)
            except Exception:
                logger.exception(f"Observer {observer!r} failed on {new_state.status.value} state")
        return True

    def submit(self, request: PredictionRequest) -> Optional[PredictionReport]:
        """Run a logical request to completion on the calling thread."""
        generation = self._next_generation()

        def dispatch(event: RequestEvent) -> None:
            self._apply(event, generation)

        def is_current() -> bool:
            with self._lock:
                return self._generation == generation

        return self.orchestrator.run(request, dispatch, is_current)

    def _submit_fields(self, **fields: Any) -> Optional[PredictionReport]:
        try:
            request = PredictionRequest(**fields)
        except ValidationError as e:
            error = InvalidRequest(str(e))
            logger.warning(f"Rejected prediction request: {e.error_count()} error(s)")
            self._apply(FetchFailed(message=error.user_message), self._next_generation())
            return None
        return self.submit(request)

    def submit_by_location(self, text: str, advisory: AdvisoryInput = None) -> Optional[PredictionReport]:
        """Request a forecast for a free-text location."""
        return self._submit_fields(location=text, advisory=advisory)

    def submit_by_coordinates(
        self,
        lat: float,
        lon: float,
        advisory: AdvisoryInput = None,
    ) -> Optional[PredictionReport]:
        """Request a forecast for a coordinate pair."""
        return self._submit_fields(coordinates={"lat": lat, "lon": lon}, advisory=advisory)

    def cancel_to_idle(self) -> None:
        """Return to idle; results of any running request are ignored."""
        self._apply(Reset(), self._next_generation())

    def force_error(self, message: str) -> None:
        """
        Fail immediately without contacting the service, e.g. when the
        environment cannot provide a location at all.
        """
        self._apply(FetchFailed(message=message), self._next_generation())
