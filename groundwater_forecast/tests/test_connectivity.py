import contextlib

import pytest

import groundwater_forecast.utils.connectivity as connectivity
from groundwater_forecast.config.settings import reload_settings
from groundwater_forecast.core.errors import MissingField
from groundwater_forecast.core.orchestrator import ForecastOrchestrator
from groundwater_forecast.models.schemas import PredictionRequest


def _reachable_only(monkeypatch, *reachable_hosts):
    attempted = []

    def fake_create_connection(address, timeout=None):
        attempted.append(address)
        if address[0] not in reachable_hosts:
            raise OSError("Network is unreachable")
        return contextlib.nullcontext()

    monkeypatch.setattr(connectivity.socket, "create_connection", fake_create_connection)
    return attempted


def test_probe_defaults_to_public_api_host(monkeypatch):
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    settings = reload_settings()
    assert connectivity.probe_target(settings) == ("api.openai.com", 443)


@pytest.mark.parametrize("base_url, expected", [
    ("http://10.0.0.5:8000/v1", ("10.0.0.5", 8000)),
    ("https://proxy.example/v1", ("proxy.example", 443)),
    ("http://localhost/v1", ("localhost", 80)),
])
def test_probe_follows_configured_base_url(monkeypatch, base_url, expected):
    monkeypatch.setenv("OPENAI_BASE_URL", base_url)
    settings = reload_settings()
    assert connectivity.probe_target(settings) == expected


def test_is_online_checks_configured_endpoint(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "http://10.0.0.5:8000/v1")
    reload_settings()
    attempted = _reachable_only(monkeypatch, "10.0.0.5")

    assert connectivity.is_online()
    assert attempted == [("10.0.0.5", 8000)]


def test_is_online_reports_unreachable_host(monkeypatch):
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    reload_settings()
    _reachable_only(monkeypatch)
    assert not connectivity.is_online()


class AlwaysIncomplete:
    def __init__(self):
        self.calls = 0

    def fetch_candidate(self, prompt):
        self.calls += 1
        raise MissingField("report")


def test_terminal_failure_not_retried_when_private_endpoint_reachable(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "http://10.0.0.5:8000/v1")
    settings = reload_settings()
    _reachable_only(monkeypatch, "10.0.0.5")
    client = AlwaysIncomplete()
    events = []

    orchestrator = ForecastOrchestrator(llm_client=client, settings=settings, sleep=lambda s: None)
    report = orchestrator.run(PredictionRequest(location="Pune"), events.append)

    assert report is None
    assert client.calls == 1
    assert events[-1].message == MissingField("report").user_message
