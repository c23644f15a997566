"""
Groundwater Forecast LLM Client

One structured-generation attempt against the OpenAI API: request, decode,
validate. Transport and API failures are classified here, once, into the
forecast error taxonomy.
"""

import time
import logging
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

import openai
from openai import OpenAI

from ..config.settings import get_settings
from ..core.errors import (
    ForecastError,
    InvalidRequest,
    MalformedPayload,
    NetworkUnavailable,
    ServiceMisconfigured,
    ServiceUnavailable,
    UnexpectedServiceError,
)
from ..models.response_contract import response_format
from .json_parser import parse_json_response
from .validation import validate_candidate

logger = logging.getLogger("groundwater.llm_client")


@dataclass
class LLMResponse:
    """Structured response from LLM."""
    content: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    finish_reason: str
    latency_ms: int


@dataclass
class TokenTracker:
    """Tracks token usage across calls."""
    total_prompt_tokens: int = 0
    total_completion_tokens: int = 0
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def add(self, prompt: int, completion: int, model: str):
        self.total_prompt_tokens += prompt
        self.total_completion_tokens += completion
        self.calls.append({
            "model": model,
            "prompt": prompt,
            "completion": completion,
            "timestamp": time.time()
        })

    @property
    def total(self) -> int:
        return self.total_prompt_tokens + self.total_completion_tokens

    def summary(self) -> Dict[str, Any]:
        return {
            "total_tokens": self.total,
            "prompt_tokens": self.total_prompt_tokens,
            "completion_tokens": self.total_completion_tokens,
            "call_count": len(self.calls)
        }


class LLMClient:
    """
    OpenAI API client for groundwater forecasts.

    Handles:
    - One request per call, no SDK-level retries (the orchestrator owns retries)
    - JSON-schema constrained output at low temperature
    - Classification of every failure into a ForecastError
    - Token usage tracking
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.settings = get_settings()
        self.token_tracker = TokenTracker()
        self.api_key = api_key or self.settings.openai_api_key
        self.base_url = base_url or self.settings.openai_base_url
        self.client: Optional[OpenAI] = None

        if self.api_key:
            kwargs: Dict[str, Any] = {
                "api_key": self.api_key,
                "timeout": self.settings.models.request_timeout_seconds,
                "max_retries": 0,
            }
            if self.base_url:
                kwargs["base_url"] = self.base_url
            self.client = OpenAI(**kwargs)
            logger.info("LLM Client initialized (model=%s)", self.settings.models.model_name)
        else:
            logger.warning("OPENAI_API_KEY not set; forecast requests will fail as misconfigured")

    @staticmethod
    def classify_api_error(error: Exception) -> ForecastError:
        """Map an OpenAI SDK exception onto the forecast error taxonomy."""
        if isinstance(error, ForecastError):
            return error
        if isinstance(error, openai.APIConnectionError):
            # Also covers APITimeoutError
            return NetworkUnavailable(str(error))
        if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return ServiceMisconfigured(str(error), status_code=error.status_code)
        if isinstance(error, (openai.BadRequestError, openai.UnprocessableEntityError)):
            return InvalidRequest(str(error), status_code=error.status_code)
        if isinstance(error, openai.APIStatusError):
            if error.status_code >= 500:
                return ServiceUnavailable(str(error), status_code=error.status_code)
            return UnexpectedServiceError(str(error), status_code=error.status_code)
        return UnexpectedServiceError(str(error))

    def call(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Make one structured LLM API call.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model to use (defaults to configured forecast model)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            LLMResponse with content and metadata

        Raises:
            ForecastError: Classified failure of this attempt
        """
        if self.client is None:
            raise ServiceMisconfigured("OPENAI_API_KEY not provided")

        model = model or self.settings.models.model_name
        if max_tokens is None:
            max_tokens = self.settings.models.max_tokens
        if temperature is None:
            temperature = self.settings.models.temperature

        total_prompt_chars = sum(len(m.get("content", "")) for m in messages)
        logger.info(f"LLM Call: model={model}, messages={len(messages)}, prompt_chars={total_prompt_chars}")

        start_time = time.time()
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_completion_tokens=int(max_tokens),
                temperature=float(temperature),
                response_format=response_format(),
            )
        except Exception as e:
            classified = self.classify_api_error(e)
            logger.error(f"LLM call failed ({classified.kind.value}): {str(e)}")
            raise classified from e

        latency_ms = int((time.time() - start_time) * 1000)

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            finish_reason = response.choices[0].finish_reason if response.choices else "unknown"
            logger.error(f"Empty response from {model}. Finish reason: {finish_reason}")
            raise MalformedPayload(f"Model {model} returned empty response (finish_reason={finish_reason})")

        usage = response.usage
        prompt_tokens = usage.prompt_tokens if usage else 0
        completion_tokens = usage.completion_tokens if usage else 0
        self.token_tracker.add(prompt_tokens, completion_tokens, model)

        result = LLMResponse(
            content=content,
            model=model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            finish_reason=response.choices[0].finish_reason,
            latency_ms=latency_ms
        )

        logger.info(
            f"LLM call completed: {model}, "
            f"{result.total_tokens} tokens, {latency_ms}ms, {len(content)} chars"
        )
        return result

    def fetch_candidate(self, prompt: str) -> Dict[str, Any]:
        """
        Run one attempt and return the decoded, structurally validated payload.

        Raises:
            ForecastError: Transport, service, decode or missing-field failure
        """
        messages = [
            {"role": "system", "content": self.settings.models.system_instruction},
            {"role": "user", "content": prompt},
        ]
        response = self.call(messages)
        try:
            candidate = parse_json_response(response.content)
            validate_candidate(candidate)
        except ForecastError as e:
            logger.error("Data validation/parsing error: %s", e)
            logger.debug("Original response text: %s", response.content[:1000])
            raise
        return candidate

    def get_token_usage(self) -> Dict[str, Any]:
        """Get current token usage summary."""
        return self.token_tracker.summary()


# Singleton instance
_llm_client_instance: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get the global LLM client instance."""
    global _llm_client_instance
    if _llm_client_instance is None:
        _llm_client_instance = LLMClient()
    return _llm_client_instance

