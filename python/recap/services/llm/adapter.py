"""Provider adapter interface and the chat-completions facade.

Rules:
- One outbound request per generate() call
- No retries, no fallback to another provider, no caching
- No logging of prompts, credentials, or response bodies
- Every failure surfaces as an LLMError subclass

Flow of ChatCompletionsAdapter.generate():
    PayloadBuilder.build → TransportClient.send (timed) → JSON parse
    → status check → extract_text(choices[0]) → normalize_usage → GenerateResult

Only the first choice is consumed. Callers that want best-of-N should issue
N calls and rank them themselves.
"""

import json
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from recap.logging import get_logger
from recap.services.llm.errors import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMTransportError,
    LLMUpstreamError,
    classify_upstream_error,
)
from recap.services.llm.extract import extract_text
from recap.services.llm.payload import DEFAULT_SAMPLING_FIELDS, PayloadBuilder
from recap.services.llm.schema import (
    XAI_UNSUPPORTED_SCHEMA_KEYS,
    SchemaConverter,
    to_json_schema,
)
from recap.services.llm.transport import TransportClient, TransportResponse
from recap.services.llm.types import GenerateParams, GenerateResult
from recap.services.llm.usage import normalize_usage
from recap.services.redact import redact_text

logger = get_logger(__name__)


class ProviderAdapter(ABC):
    """Abstract base class for LLM provider adapters.

    Adapters are built once at startup and shared. Configuration is fixed at
    construction, so concurrent generate() calls need no locking.
    """

    name: str
    default_model: str

    @abstractmethod
    async def generate(self, params: GenerateParams) -> GenerateResult:
        """Single-attempt completion.

        Raises:
            LLMValidationError: Schema descriptor could not be converted.
            LLMTimeoutError: Client-side deadline fired.
            LLMTransportError: Network failure or non-JSON body.
            LLMUpstreamError: Provider returned a non-2xx status.
            LLMEmptyResponseError: Success response without text.
        """


class ChatCompletionsAdapter(ProviderAdapter):
    """Adapter for providers speaking the chat-completions dialect.

    Subclasses pin name, default model, base URL and dialect quirks as class
    attributes; the same class can also be configured ad hoc through the
    constructor for any compatible endpoint.
    """

    name: str = ""
    default_model: str = ""
    default_base_url: str = ""
    credential_env: str = ""
    sampling_fields: Mapping[str, str] = DEFAULT_SAMPLING_FIELDS
    banned_schema_keys: Iterable[str] = XAI_UNSUPPORTED_SCHEMA_KEYS

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None,
        base_url: str | None = None,
        name: str | None = None,
        default_model: str | None = None,
        schema_converter: SchemaConverter = to_json_schema,
    ):
        """Initialize adapter.

        Args:
            client: Shared httpx.AsyncClient for connection pooling.
            api_key: Provider credential. Required.
            base_url: Base URL override; trailing slash stripped.
            name: Provider name override.
            default_model: Default model override.
            schema_converter: Descriptor → JSON-Schema collaborator.

        Raises:
            LLMConfigurationError: If the credential, name, model or base URL is missing.
        """
        self.name = name or self.name
        self.default_model = default_model or self.default_model
        if not self.name:
            raise LLMConfigurationError("Provider name is required")
        if not api_key or not api_key.strip():
            credential = self.credential_env or "An API key"
            raise LLMConfigurationError(
                f"{credential} is required to use the {self.name} provider", provider=self.name
            )
        if not self.default_model:
            raise LLMConfigurationError(
                f"A default model is required for the {self.name} provider", provider=self.name
            )

        resolved_url = (base_url or self.default_base_url).rstrip("/")
        if not resolved_url:
            raise LLMConfigurationError(
                f"A base URL is required for the {self.name} provider", provider=self.name
            )

        self.base_url = resolved_url
        self._api_key = api_key
        self._payload_builder = PayloadBuilder(
            provider=self.name,
            default_model=self.default_model,
            sampling_fields=dict(self.sampling_fields),
            banned_schema_keys=frozenset(self.banned_schema_keys),
            schema_converter=schema_converter,
        )
        self._transport = TransportClient(client, provider=self.name)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, base_url={self.base_url!r}, "
            f"api_key={redact_text(self._api_key, keep=4)!r})"
        )

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, params: GenerateParams) -> dict:
        """Request body for params (exposed for inspection and tests)."""
        return self._payload_builder.build(params)

    async def generate(self, params: GenerateParams) -> GenerateResult:
        payload = self.build_payload(params)

        started = time.monotonic()
        response = await self._transport.send(
            self.chat_url,
            payload,
            headers=self._build_headers(),
            timeout_ms=params.timeout_ms,
        )
        latency_ms = int((time.monotonic() - started) * 1000)

        data = self._parse_body(response)

        if not response.is_success:
            raise self._upstream_error(response, data)

        body = data if isinstance(data, dict) else {}
        choices = body.get("choices")
        choice = choices[0] if isinstance(choices, list) and choices else None
        content = extract_text(choice)

        if not content:
            raise LLMEmptyResponseError(
                f"{self.name} API returned an empty response", provider=self.name
            )

        return GenerateResult(
            content=content,
            raw_response=data,
            provider=self.name,
            model=body.get("model") or payload["model"],
            usage=normalize_usage(body.get("usage"), latency_ms),
        )

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _parse_body(self, response: TransportResponse) -> Any:
        if not response.text:
            return None
        try:
            return json.loads(response.text)
        except json.JSONDecodeError as e:
            logger.warning(
                "llm.response.unparseable",
                provider=self.name,
                status_code=response.status_code,
                body_chars=len(response.text),
            )
            raise LLMTransportError(
                f"{self.name} API returned a non-JSON response", provider=self.name
            ) from e

    def _upstream_error(self, response: TransportResponse, data: Any) -> LLMUpstreamError:
        body = data if isinstance(data, dict) else {}
        error = body.get("error")
        if isinstance(error, str):
            error = {"message": error}
        elif not isinstance(error, dict):
            error = {}

        message = (
            error.get("message")
            or body.get("message")
            or response.reason_phrase
            or "Unknown error"
        )
        code = error.get("code") or body.get("code")
        code = str(code) if code is not None else None

        prefix = f"{self.name} API error" + (f" ({code})" if code else "")
        return LLMUpstreamError(
            f"{prefix}: {message}",
            status_code=response.status_code,
            code=code,
            provider=self.name,
            upstream_class=classify_upstream_error(response.status_code, code, str(message)),
        )
