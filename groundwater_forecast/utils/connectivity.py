"""
Groundwater Forecast Connectivity Probe

Cheap offline detection used by the orchestrator to classify failures.
"""

import logging
import socket
from typing import Optional, Tuple
from urllib.parse import urlparse

from ..config.settings import Settings, get_settings

logger = logging.getLogger("groundwater.connectivity")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def probe_target(settings: Optional[Settings] = None) -> Tuple[str, int]:
    """
    Host and port the probe should reach.

    The configured OPENAI_BASE_URL wins, so a host talking to a proxy or a
    local endpoint is not judged by whether the public API is reachable.
    """
    settings = settings or get_settings()
    if settings.openai_base_url:
        parsed = urlparse(settings.openai_base_url)
        try:
            port = parsed.port
        except ValueError:
            logger.warning(f"Ignoring invalid port in base URL {settings.openai_base_url!r}")
            port = None
        if parsed.hostname:
            return parsed.hostname, port or _DEFAULT_PORTS.get(parsed.scheme, 443)
    return settings.connectivity_host, settings.connectivity_port


def is_online(
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout_s: Optional[float] = None,
) -> bool:
    """Return True if a TCP connection to the service host can be opened."""
    settings = get_settings()
    default_host, default_port = probe_target(settings)
    host = host or default_host
    port = port or default_port
    timeout_s = timeout_s if timeout_s is not None else settings.connectivity_timeout_seconds
    try:
        with socket.create_connection((host, port), timeout=timeout_s):
            return True
    except OSError as e:
        logger.info(f"Connectivity check to {host}:{port} failed: {e}")
        return False
