"""Utility modules for the groundwater forecast core."""

from .llm_client import LLMClient, get_llm_client
from .json_parser import parse_json_response, strip_code_fence
from .validation import validate_candidate
from .connectivity import is_online

__all__ = [
    "LLMClient",
    "get_llm_client",
    "parse_json_response",
    "strip_code_fence",
    "validate_candidate",
    "is_online",
]
