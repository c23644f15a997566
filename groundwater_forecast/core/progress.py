"""
Loading progress text for a prediction session.

Purely an observer of RequestState: the orchestration never reads it.
"""

from typing import Optional, Sequence

from ..config.settings import get_settings
from ..models.request_state import RequestState, RequestStatus

LOADING_MESSAGES = (
    "Analyzing regional geological data...",
    "Cross-referencing historical rainfall patterns...",
    "Evaluating population and agricultural impact...",
    "Generating comprehensive forecast...",
)


class LoadingNarrator:
    """Maps a session state and a UI tick counter to a status line."""

    def __init__(
        self,
        messages: Sequence[str] = LOADING_MESSAGES,
        max_attempts: Optional[int] = None,
    ):
        if not messages:
            raise ValueError("LoadingNarrator needs at least one message")
        self.messages = tuple(messages)
        self.max_attempts = max_attempts or get_settings().retry.max_attempts

    def describe(self, state: RequestState, tick: int = 0) -> str:
        if state.status != RequestStatus.LOADING:
            return ""
        if state.retry_attempt > 0:
            return f"Connection Unstable. Retrying... ({state.retry_attempt}/{self.max_attempts})"
        return self.messages[tick % len(self.messages)]
