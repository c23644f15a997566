"""
Groundwater Forecast Error Taxonomy

Every failure of a logical request is classified once, where it happens,
into one of these kinds. The orchestrator only ever looks at ``kind`` and
``retriable``; it never inspects message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories for a forecast request."""
    NETWORK_UNAVAILABLE = "NetworkUnavailable"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    MALFORMED_PAYLOAD = "MalformedPayload"
    MISSING_FIELD = "MissingField"
    INCONSISTENT_TIMELINE = "InconsistentTimeline"
    INVALID_REQUEST = "InvalidRequest"
    SERVICE_MISCONFIGURED = "ServiceMisconfigured"
    UNEXPECTED = "UnexpectedServiceError"


USER_MESSAGES = {
    ErrorKind.NETWORK_UNAVAILABLE: "Network error. Please check your internet connection.",
    ErrorKind.SERVICE_UNAVAILABLE: "The prediction service is temporarily unavailable. Please try again.",
    ErrorKind.MALFORMED_PAYLOAD: "The service returned an unreadable response. This may be a temporary issue.",
    ErrorKind.MISSING_FIELD: "The service's response was incomplete. Please try again.",
    ErrorKind.INCONSISTENT_TIMELINE: "The service returned an inconsistent forecast timeline. Please try again.",
    ErrorKind.INVALID_REQUEST: "The location could not be processed. Please try a different one.",
    ErrorKind.SERVICE_MISCONFIGURED: "The prediction service is not configured correctly. Please contact support.",
    ErrorKind.UNEXPECTED: "An unexpected error occurred. Please try again later.",
}

RETRIABLE_KINDS = frozenset({ErrorKind.NETWORK_UNAVAILABLE, ErrorKind.SERVICE_UNAVAILABLE})


class ForecastError(Exception):
    """Base class for classified forecast failures."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, detail: str = "", *, status_code: Optional[int] = None):
        super().__init__(detail or self.kind.value)
        self.detail = detail
        self.status_code = status_code

    @property
    def retriable(self) -> bool:
        return self.kind in RETRIABLE_KINDS

    @property
    def user_message(self) -> str:
        """Stable, presentable text for this failure kind."""
        return USER_MESSAGES[self.kind]


class NetworkUnavailable(ForecastError):
    kind = ErrorKind.NETWORK_UNAVAILABLE


class ServiceUnavailable(ForecastError):
    kind = ErrorKind.SERVICE_UNAVAILABLE


class MalformedPayload(ForecastError):
    kind = ErrorKind.MALFORMED_PAYLOAD


class MissingField(ForecastError):
    """Raised when a required field is absent or null in a decoded response."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field_name: str):
        super().__init__(f"API response is missing required field: {field_name}")
        self.field_name = field_name


class InconsistentTimeline(ForecastError):
    kind = ErrorKind.INCONSISTENT_TIMELINE


class InvalidRequest(ForecastError):
    kind = ErrorKind.INVALID_REQUEST


class ServiceMisconfigured(ForecastError):
    kind = ErrorKind.SERVICE_MISCONFIGURED


class UnexpectedServiceError(ForecastError):
    kind = ErrorKind.UNEXPECTED
