"""LLM adapter layer for provider-agnostic completions.

Callers ask for a text or schema-constrained completion without knowing which
backend serves it. The layer includes:

- Provider adapters (Grok, OpenAI) over the chat-completions dialect
- Payload building with sparse parameters and schema sanitization
- Response text extraction and usage normalization
- A typed error taxonomy
- A router with feature flags and observability events

Usage:
    from recap.services.llm import GenerateParams, LLMRouter

    router = LLMRouter.from_settings(httpx_client)
    result = await router.generate(
        GenerateParams(prompt="Summarize this transcript...", schema=VideoSummary),
        provider="grok",  # LLM_DEFAULT_PROVIDER when omitted
    )
    summary = VideoSummary.model_validate(result.parse_json())

Rules:
- One request per call; no retries, fallback, caching, or streaming
- No logging of prompts, credentials, or response bodies
"""

from recap.services.llm.adapter import ChatCompletionsAdapter, ProviderAdapter
from recap.services.llm.errors import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMError,
    LLMErrorClass,
    LLMTimeoutError,
    LLMTransportError,
    LLMUpstreamError,
    LLMValidationError,
    UpstreamErrorClass,
    classify_upstream_error,
)
from recap.services.llm.extract import extract_text
from recap.services.llm.factory import build_adapter
from recap.services.llm.providers import GrokAdapter, OpenAIAdapter
from recap.services.llm.router import LLMRouter
from recap.services.llm.schema import sanitize_schema, to_json_schema
from recap.services.llm.types import (
    GenerateParams,
    GenerateResult,
    LLMCallContext,
    LLMOperation,
    UsageStats,
)
from recap.services.llm.usage import normalize_usage

__all__ = [
    # Core types
    "GenerateParams",
    "GenerateResult",
    "UsageStats",
    "LLMOperation",
    "LLMCallContext",
    # Adapters
    "ProviderAdapter",
    "ChatCompletionsAdapter",
    "GrokAdapter",
    "OpenAIAdapter",
    "build_adapter",
    # Router
    "LLMRouter",
    # Errors
    "LLMError",
    "LLMErrorClass",
    "LLMConfigurationError",
    "LLMValidationError",
    "LLMTransportError",
    "LLMTimeoutError",
    "LLMUpstreamError",
    "LLMEmptyResponseError",
    "UpstreamErrorClass",
    "classify_upstream_error",
    # Normalization helpers
    "extract_text",
    "normalize_usage",
    "sanitize_schema",
    "to_json_schema",
]
