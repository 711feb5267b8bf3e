"""LLM error taxonomy and upstream error classification.

Every failure of a generate() call surfaces as an LLMError subclass:

- E_LLM_CONFIGURATION: Credential missing, or provider unknown/disabled
- E_LLM_SCHEMA_INVALID: Schema descriptor could not become a JSON Schema
- E_LLM_TRANSPORT: Network failure or a body that is not JSON
- E_LLM_TIMEOUT: Client-side deadline fired before a response arrived
- E_LLM_UPSTREAM: Provider returned a non-2xx status
- E_LLM_EMPTY_RESPONSE: Well-formed success with no extractable text

Upstream failures are further tagged with an UpstreamErrorClass so callers
layering retry or fallback policy on top can decide without parsing messages.
"""

from enum import Enum


class LLMErrorClass(str, Enum):
    """Normalized LLM error classifications."""

    CONFIGURATION = "E_LLM_CONFIGURATION"
    SCHEMA_INVALID = "E_LLM_SCHEMA_INVALID"
    TRANSPORT = "E_LLM_TRANSPORT"
    TIMEOUT = "E_LLM_TIMEOUT"
    UPSTREAM = "E_LLM_UPSTREAM"
    EMPTY_RESPONSE = "E_LLM_EMPTY_RESPONSE"


class UpstreamErrorClass(str, Enum):
    """Coarse reason for a non-2xx provider response."""

    INVALID_KEY = "invalid_key"
    RATE_LIMIT = "rate_limit"
    CONTEXT_TOO_LARGE = "context_too_large"
    MODEL_NOT_AVAILABLE = "model_not_available"
    BAD_REQUEST = "bad_request"
    PROVIDER_DOWN = "provider_down"


class LLMError(Exception):
    """Base exception for LLM adapter errors.

    Attributes:
        error_class: The normalized error classification
        message: Human-readable error message
        provider: The provider involved (if known)
    """

    def __init__(
        self,
        error_class: LLMErrorClass,
        message: str,
        provider: str | None = None,
    ):
        self.error_class = error_class
        self.message = message
        self.provider = provider
        super().__init__(message)


class LLMConfigurationError(LLMError):
    """Adapter cannot be built: missing credential or unknown provider."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(LLMErrorClass.CONFIGURATION, message, provider)


class LLMValidationError(LLMError):
    """Schema descriptor could not be converted, or structured output is malformed."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(LLMErrorClass.SCHEMA_INVALID, message, provider)


class LLMTransportError(LLMError):
    """Network-level failure or unparseable response body."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(LLMErrorClass.TRANSPORT, message, provider)


class LLMTimeoutError(LLMError):
    """Client-side deadline fired before a response was obtained."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(LLMErrorClass.TIMEOUT, message, provider)


class LLMEmptyResponseError(LLMError):
    """Provider answered successfully but no text could be extracted."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(LLMErrorClass.EMPTY_RESPONSE, message, provider)


class LLMUpstreamError(LLMError):
    """Provider returned a non-success HTTP status.

    Attributes:
        status_code: HTTP status returned by the provider
        code: Upstream error code from the body, when provided
        upstream_class: Coarse classification of the failure
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str | None = None,
        provider: str | None = None,
        upstream_class: UpstreamErrorClass | None = None,
    ):
        self.status_code = status_code
        self.code = code
        self.upstream_class = upstream_class or classify_upstream_error(status_code, code, message)
        super().__init__(LLMErrorClass.UPSTREAM, message, provider)


def classify_upstream_error(
    status_code: int,
    code: str | None,
    message: str | None,
) -> UpstreamErrorClass:
    """Classify a non-2xx provider response.

    Rules (chat-completions family):
    - 401 or 403 → INVALID_KEY
    - 429 → RATE_LIMIT
    - 404 → MODEL_NOT_AVAILABLE
    - 5xx → PROVIDER_DOWN
    - code "context_length_exceeded", "maximum context length" in message,
      or 413 → CONTEXT_TOO_LARGE
    - "model" and "not found" in message → MODEL_NOT_AVAILABLE
    - other 4xx → BAD_REQUEST
    """
    if status_code in (401, 403):
        return UpstreamErrorClass.INVALID_KEY

    if status_code == 429:
        return UpstreamErrorClass.RATE_LIMIT

    if status_code == 404:
        return UpstreamErrorClass.MODEL_NOT_AVAILABLE

    if status_code >= 500:
        return UpstreamErrorClass.PROVIDER_DOWN

    lowered = (message or "").lower()

    if code == "context_length_exceeded" or "maximum context length" in lowered:
        return UpstreamErrorClass.CONTEXT_TOO_LARGE

    if status_code == 413:
        return UpstreamErrorClass.CONTEXT_TOO_LARGE

    if "model" in lowered and "not found" in lowered:
        return UpstreamErrorClass.MODEL_NOT_AVAILABLE

    if 400 <= status_code < 500:
        return UpstreamErrorClass.BAD_REQUEST

    return UpstreamErrorClass.PROVIDER_DOWN
