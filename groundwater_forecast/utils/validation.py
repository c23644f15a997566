"""
Groundwater Forecast Validation

Structural check of a decoded response before it is sanitized.
"""

import logging
from typing import Any, Mapping

from ..core.errors import MalformedPayload, MissingField
from ..models.response_contract import REQUIRED_FIELDS, REQUIRED_REPORT_FIELDS
from .json_parser import safe_get

logger = logging.getLogger("groundwater.validation")


def validate_candidate(candidate: Any) -> None:
    """
    Confirm every required field is present and non-null.

    Fails fast on the first omission, in contract order. No repair is
    attempted here.

    Raises:
        MalformedPayload: If the candidate is not an object
        MissingField: Naming the first absent field
    """
    if not isinstance(candidate, Mapping):
        raise MalformedPayload(f"Expected a JSON object, got {type(candidate).__name__}")

    for key in REQUIRED_FIELDS:
        if candidate.get(key) is None:
            logger.warning(f"Response missing required field: {key}")
            raise MissingField(key)

    for key in REQUIRED_REPORT_FIELDS:
        if safe_get(candidate, "report", key) is None:
            logger.warning(f"Response missing required field: report.{key}")
            raise MissingField(f"report.{key}")
