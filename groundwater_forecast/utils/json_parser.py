"""
Groundwater Forecast JSON Parser

Decodes the model's text payload into a candidate object, tolerating a
markdown code fence around the JSON.
"""

import re
import json
import logging
from typing import Any, Dict

from ..core.errors import MalformedPayload

logger = logging.getLogger("groundwater.json_parser")

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """
    Remove a single markdown code fence wrapping the whole payload.

    Text without a fence is returned trimmed but otherwise unchanged.
    """
    stripped = (text or "").strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_json_response(response_text: str) -> Dict[str, Any]:
    """
    Parse the model response into a dictionary.

    Args:
        response_text: Raw text returned by the service

    Returns:
        Decoded JSON object

    Raises:
        MalformedPayload: If the text is empty, is not JSON, or is not an object
    """
    payload = strip_code_fence(response_text)
    if not payload:
        raise MalformedPayload("Service returned an empty payload")

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error("JSON decode failed at line %s col %s", e.lineno, e.colno)
        logger.debug("Undecodable payload: %s", payload[:500])
        raise MalformedPayload(f"Invalid JSON in response: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedPayload(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def safe_get(
    data: Dict[str, Any],
    *keys: str,
    default: Any = None
) -> Any:
    """
    Safely get nested value from dictionary.

    Usage:
        value = safe_get(data, "report", "shortTerm", default=None)
    """
    current = data
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default
    return current
