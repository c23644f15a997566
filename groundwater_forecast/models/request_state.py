"""
Groundwater Forecast Request State

The observable status of a prediction session as an immutable value, the
events that move it, and the pure transition function between them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .schemas import PredictionReport


class RequestStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RequestState:
    """
    Snapshot of a prediction session.

    ``data`` is set only in SUCCESS, ``error`` only in ERROR.
    ``retry_attempt`` is non-zero only while LOADING after a retriable failure.
    """
    status: RequestStatus = RequestStatus.IDLE
    data: Optional[PredictionReport] = None
    error: Optional[str] = None
    retry_attempt: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in (RequestStatus.SUCCESS, RequestStatus.ERROR)

    @property
    def is_retrying(self) -> bool:
        return self.status == RequestStatus.LOADING and self.retry_attempt > 0


IDLE_STATE = RequestState()


# ============================================================================
# Events
# ============================================================================

@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class RetryScheduled:
    attempt: int


@dataclass(frozen=True)
class FetchSucceeded:
    report: PredictionReport


@dataclass(frozen=True)
class FetchFailed:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


RequestEvent = Union[FetchStarted, RetryScheduled, FetchSucceeded, FetchFailed, Reset]


def transition(state: RequestState, event: RequestEvent) -> RequestState:
    """
    Compute the next state.

    Retry and success events only apply while LOADING; once a request is
    terminal they are ignored until a new FetchStarted. FetchFailed applies
    from any state so callers can fail out-of-band.
    """
    if isinstance(event, FetchStarted):
        return RequestState(status=RequestStatus.LOADING)

    if isinstance(event, RetryScheduled):
        if state.status != RequestStatus.LOADING:
            return state
        if event.attempt < state.retry_attempt:
            raise ValueError(
                f"retry attempt went backwards: {state.retry_attempt} -> {event.attempt}"
            )
        return RequestState(status=RequestStatus.LOADING, retry_attempt=event.attempt)

    if isinstance(event, FetchSucceeded):
        if state.status != RequestStatus.LOADING:
            return state
        return RequestState(status=RequestStatus.SUCCESS, data=event.report)

    if isinstance(event, FetchFailed):
        return RequestState(status=RequestStatus.ERROR, error=event.message)

    if isinstance(event, Reset):
        return IDLE_STATE

    raise TypeError(f"Unhandled event type: {type(event).__name__}")
