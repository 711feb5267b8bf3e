"""Shared type definitions for the LLM adapter layer.

- GenerateParams: Provider-agnostic request for a single completion
- GenerateResult: Normalized result of a successful call
- UsageStats: Unified token and latency accounting
- LLMOperation / LLMCallContext: Observability metadata supplied by callers

Sparse propagation:
- Every optional GenerateParams field defaults to None
- A None field never produces a key in the outgoing provider payload
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from recap.services.llm.errors import LLMValidationError


@dataclass(frozen=True)
class UsageStats:
    """Token usage and latency for one call.

    All fields are optional: providers report different subsets, and a
    response without a usage block still carries the measured latency.

    Attributes:
        prompt_tokens: Tokens in the prompt (a.k.a. input tokens)
        completion_tokens: Tokens in the completion (a.k.a. output tokens)
        total_tokens: Provider total, or prompt + completion when absent
        latency_ms: Wall-clock latency of the HTTP round trip
    """

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    latency_ms: int | None = None


@dataclass(frozen=True)
class GenerateParams:
    """Request for a single completion.

    Attributes:
        prompt: User prompt text (required)
        model: Model override; the adapter default is used when None
        temperature: Sampling temperature
        top_p: Nucleus sampling mass
        max_output_tokens: Completion length cap
        timeout_ms: Client-side deadline; None or <= 0 means no deadline
        schema: Structured-output descriptor (pydantic model, any type
            pydantic can describe, or a JSON-Schema dict)
        schema_name: Label sent alongside the schema
    """

    prompt: str
    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_output_tokens: int | None = None
    timeout_ms: int | None = None
    schema: Any = None
    schema_name: str | None = None


@dataclass(frozen=True)
class GenerateResult:
    """Normalized result of a successful generate() call.

    Attributes:
        content: Extracted assistant text (never empty)
        raw_response: Parsed provider body, kept for diagnostics
        provider: Name of the adapter that served the call
        model: Model reported by the provider, or the model that was requested
        usage: Token and latency accounting
    """

    content: str
    raw_response: Any
    provider: str
    model: str
    usage: UsageStats | None = None

    def parse_json(self) -> Any:
        """Decode content as JSON (for structured-output calls).

        Raises:
            LLMValidationError: If content is not valid JSON.
        """
        try:
            return json.loads(self.content)
        except json.JSONDecodeError as e:
            raise LLMValidationError(
                f"Structured output is not valid JSON: {e.msg}", provider=self.provider
            ) from e


class LLMOperation(str, Enum):
    """What the caller is using the model for. Drives log fields only."""

    SUMMARIZE = "summarize"
    ANALYZE = "analyze"
    KEY_TEST = "key_test"
    OTHER = "other"


@dataclass(frozen=True)
class LLMCallContext:
    """Observability metadata for one call."""

    operation: LLMOperation = LLMOperation.OTHER
    video_id: str | None = None
