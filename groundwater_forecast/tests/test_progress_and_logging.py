import logging

import pytest

from groundwater_forecast.core.progress import LOADING_MESSAGES, LoadingNarrator
from groundwater_forecast.core.session import PredictionSession
from groundwater_forecast.forecast_logging.execution_logger import RequestLogger
from groundwater_forecast.models.request_state import IDLE_STATE, RequestState, RequestStatus


def test_narrator_cycles_messages_while_loading():
    narrator = LoadingNarrator(max_attempts=3)
    loading = RequestState(status=RequestStatus.LOADING)
    assert narrator.describe(loading, tick=0) == LOADING_MESSAGES[0]
    assert narrator.describe(loading, tick=1) == LOADING_MESSAGES[1]
    assert narrator.describe(loading, tick=len(LOADING_MESSAGES)) == LOADING_MESSAGES[0]


def test_narrator_reports_retries():
    narrator = LoadingNarrator(max_attempts=3)
    retrying = RequestState(status=RequestStatus.LOADING, retry_attempt=2)
    assert narrator.describe(retrying, tick=5) == "Connection Unstable. Retrying... (2/3)"


def test_narrator_silent_outside_loading():
    narrator = LoadingNarrator()
    assert narrator.describe(IDLE_STATE) == ""
    assert narrator.describe(RequestState(status=RequestStatus.ERROR, error="x")) == ""


def test_narrator_uses_configured_ceiling(fresh_settings):
    fresh_settings.retry.max_attempts = 5
    retrying = RequestState(status=RequestStatus.LOADING, retry_attempt=1)
    assert LoadingNarrator().describe(retrying).endswith("(1/5)")


def test_narrator_requires_messages():
    with pytest.raises(ValueError):
        LoadingNarrator(messages=())


def test_request_logger_records_session_transitions(caplog):
    session = PredictionSession(orchestrator=object())
    request_logger = RequestLogger("unit", verbose=False)
    request_logger.attach(session)

    with caplog.at_level(logging.INFO, logger="groundwater.session.unit"):
        session.force_error("Geolocation is not supported by your browser.")
        session.cancel_to_idle()

    entries = request_logger.get_structured_log()
    assert [e["data"]["status"] for e in entries] == ["error", "idle"]
    assert entries[0]["data"]["error"] == "Geolocation is not supported by your browser."
    assert "Forecast failed" in caplog.text


def test_request_logger_writes_file(tmp_path):
    log_file = tmp_path / "session.log"
    request_logger = RequestLogger("file", log_file=log_file)

    request_logger.log_state(RequestState(status=RequestStatus.LOADING, retry_attempt=1))
    for handler in request_logger.logger.handlers:
        handler.flush()

    assert "retry 1 scheduled" in log_file.read_text()
