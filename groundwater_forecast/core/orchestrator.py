"""
Groundwater Forecast Orchestrator

Drives one logical prediction request through its attempts:

    Idle -> Attempting(1) -> Success
                          -> Retrying(n) -> Attempting(n+1) -> ...
                          -> Failed

Each attempt calls the service, validates and sanitizes the response.
Retriable failures back off exponentially until the attempt ceiling;
everything else fails immediately with the kind's user message.
"""

import logging
import time
from typing import Callable, Optional, Tuple

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config.settings import Settings, get_settings
from ..models.request_state import (
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    RequestEvent,
    RetryScheduled,
)
from ..models.schemas import PredictionReport, PredictionRequest
from ..utils.connectivity import is_online
from ..utils.llm_client import LLMClient, get_llm_client
from .errors import ForecastError, NetworkUnavailable, UnexpectedServiceError
from .prompt_builder import build_prediction_prompt
from .sanitizer import sanitize_prediction

logger = logging.getLogger("groundwater.orchestrator")

Dispatch = Callable[[RequestEvent], None]


class RequestSuperseded(Exception):
    """The session moved on (reset or new request) while this one was running."""


def _is_retriable(error: BaseException) -> bool:
    return isinstance(error, ForecastError) and error.retriable


class ForecastOrchestrator:
    """
    Runs the attempt loop for one logical request at a time.

    Collaborators are injectable so the loop can run against a fake service,
    a fake connectivity probe and a fake clock:
    - llm_client: anything with ``fetch_candidate(prompt) -> dict``
    - connectivity_probe: returns True while the host is online
    - sleep / clock: suspension and monotonic time in seconds
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        settings: Optional[Settings] = None,
        connectivity_probe: Optional[Callable[[], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or get_settings()
        self._llm_client = llm_client
        self.connectivity_probe = connectivity_probe or is_online
        self._sleep = sleep
        self._clock = clock

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    def _classify(self, error: Exception) -> ForecastError:
        """Reduce any attempt failure to one ForecastError, honoring offline state."""
        if isinstance(error, ForecastError):
            classified = error
        else:
            logger.exception("Unclassified failure during forecast attempt")
            classified = UnexpectedServiceError(str(error))

        if not isinstance(classified, NetworkUnavailable) and not self.connectivity_probe():
            logger.warning(f"Host is offline; treating {classified.kind.value} as network failure")
            return NetworkUnavailable(f"Host reported offline ({classified.kind.value})")
        return classified

    def _attempt(
        self,
        request: PredictionRequest,
        is_current: Callable[[], bool],
    ) -> Tuple[PredictionReport, float]:
        if not is_current():
            raise RequestSuperseded()
        started_at = self._clock()
        try:
            prompt = build_prediction_prompt(request)
            candidate = self.llm_client.fetch_candidate(prompt)
            report = sanitize_prediction(candidate, request)
        except Exception as e:
            classified = self._classify(e)
            if classified is e:
                raise
            raise classified from e
        return report, started_at

    def _wait_for_min_loading(self, started_at: float) -> None:
        floor = self.settings.retry.min_loading_seconds
        elapsed = self._clock() - started_at
        if elapsed < floor:
            self._sleep(floor - elapsed)

    def run(
        self,
        request: PredictionRequest,
        dispatch: Dispatch,
        is_current: Callable[[], bool] = lambda: True,
    ) -> Optional[PredictionReport]:
        """
        Execute one logical request, reporting every transition via ``dispatch``.

        Args:
            request: Validated prediction request
            dispatch: Receives FetchStarted, RetryScheduled, FetchSucceeded or FetchFailed
            is_current: Returns False once the caller has abandoned this request

        Returns:
            The sanitized report on success, None on failure or supersession
        """
        retry_config = self.settings.retry
        dispatch(FetchStarted())

        def announce_retry(retry_state: RetryCallState) -> None:
            attempt = retry_state.attempt_number
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            error = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                f"Attempt {attempt}/{retry_config.max_attempts} failed "
                f"({getattr(getattr(error, 'kind', None), 'value', error)}); retrying in {delay:.2f}s"
            )
            dispatch(RetryScheduled(attempt=attempt))

        controller = Retrying(
            stop=stop_after_attempt(retry_config.max_attempts),
            wait=wait_exponential(multiplier=retry_config.base_delay_seconds, min=0),
            retry=retry_if_exception(_is_retriable),
            before_sleep=announce_retry,
            sleep=self._sleep,
            reraise=True,
        )

        try:
            report, started_at = controller(self._attempt, request, is_current)
        except RequestSuperseded:
            logger.info("Forecast request superseded; discarding")
            return None
        except ForecastError as e:
            logger.error(f"Forecast request failed: {e.kind.value}: {e}")
            dispatch(FetchFailed(message=e.user_message))
            return None

        self._wait_for_min_loading(started_at)
        logger.info(f"Forecast ready for '{report.location_name}'")
        dispatch(FetchSucceeded(report=report))
        return report
