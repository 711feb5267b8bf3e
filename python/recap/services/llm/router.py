"""LLM router for adapter selection and observability.

- Resolves an adapter by provider name
- Checks feature flags for provider availability
- Applies the configured default deadline when the caller sets none
- Emits llm.request.started / llm.request.finished / llm.request.failed

The router delegates exactly once to the resolved adapter. It never retries
and never falls back to another provider; that policy belongs to callers.
All events go through safe_kv(), so prompts and content never reach logs.
"""

import dataclasses
import time
from collections.abc import Iterable

import httpx

from recap.config import Settings, get_settings
from recap.logging import get_logger
from recap.services.llm.adapter import ProviderAdapter
from recap.services.llm.errors import LLMConfigurationError, LLMError, LLMUpstreamError
from recap.services.llm.factory import build_adapter
from recap.services.llm.providers import PROVIDERS
from recap.services.llm.types import (
    GenerateParams,
    GenerateResult,
    LLMCallContext,
    LLMOperation,
)
from recap.services.redact import hash_text, safe_kv

logger = get_logger(__name__)


def _base_log_fields(
    provider: str,
    model_name: str,
    call_ctx: LLMCallContext | None,
) -> dict:
    """Build base log fields for LLM events."""
    fields: dict = {
        "provider": provider,
        "model_name": model_name,
        "llm_operation": call_ctx.operation.value if call_ctx else LLMOperation.OTHER.value,
    }
    if call_ctx and call_ctx.video_id:
        fields["video_id"] = call_ctx.video_id
    return fields


class LLMRouter:
    """Routes generate() calls to registered provider adapters."""

    def __init__(
        self,
        adapters: Iterable[ProviderAdapter],
        *,
        enabled: dict[str, bool] | None = None,
        default_timeout_ms: int | None = None,
        default_provider: str | None = None,
    ):
        """Initialize router.

        Args:
            adapters: Constructed adapters, keyed by their name.
            enabled: Per-provider feature flags; providers default to enabled.
            default_timeout_ms: Deadline applied when params.timeout_ms is None.
            default_provider: Provider used when generate() is called without one.
        """
        self._adapters: dict[str, ProviderAdapter] = {a.name: a for a in adapters}
        self._feature_flags = dict(enabled or {})
        self._default_timeout_ms = default_timeout_ms
        self._default_provider = default_provider

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient,
        settings: Settings | None = None,
        *,
        enabled: dict[str, bool] | None = None,
    ) -> "LLMRouter":
        """Register every provider that has a credential configured."""
        settings = settings or get_settings()
        adapters = [
            build_adapter(name, client, settings)
            for name in PROVIDERS
            if settings.api_key_for(name)
        ]
        return cls(
            adapters,
            enabled=enabled,
            default_timeout_ms=settings.llm_default_timeout_ms,
            default_provider=settings.llm_default_provider,
        )

    def providers(self) -> list[str]:
        """Names of registered providers that are enabled."""
        return [name for name in self._adapters if self._is_provider_enabled(name)]

    def resolve_adapter(self, provider: str) -> ProviderAdapter:
        """Get adapter for provider, checking feature flags.

        Raises:
            LLMConfigurationError: If provider is unknown or disabled.
        """
        if provider not in self._adapters:
            raise LLMConfigurationError(f"Unknown provider: {provider}", provider=provider)

        if not self._is_provider_enabled(provider):
            raise LLMConfigurationError(f"Provider {provider} is disabled", provider=provider)

        return self._adapters[provider]

    def _is_provider_enabled(self, provider: str) -> bool:
        return self._feature_flags.get(provider, True)

    def is_provider_available(self, provider: str) -> bool:
        """Check if a provider is available (registered and enabled)."""
        return provider in self._adapters and self._is_provider_enabled(provider)

    async def generate(
        self,
        params: GenerateParams,
        *,
        provider: str | None = None,
        call_context: LLMCallContext | None = None,
    ) -> GenerateResult:
        """Single-attempt generation through provider, or the default provider.

        Raises:
            LLMConfigurationError: No provider given and no default configured.
            LLMError: Whatever the adapter raised, unchanged.
        """
        provider = provider or self._default_provider
        if not provider:
            raise LLMConfigurationError("No LLM provider specified and no default configured")
        adapter = self.resolve_adapter(provider)

        if params.timeout_ms is None and self._default_timeout_ms is not None:
            params = dataclasses.replace(params, timeout_ms=self._default_timeout_ms)

        base = _base_log_fields(provider, params.model or adapter.default_model, call_context)
        logger.info(
            "llm.request.started",
            **safe_kv(
                **base,
                prompt_chars=len(params.prompt),
                prompt_sha256=hash_text(params.prompt),
                structured=params.schema is not None,
                timeout_ms=params.timeout_ms,
            ),
        )

        start = time.monotonic()

        try:
            result = await adapter.generate(params)
        except LLMError as e:
            latency_ms = int((time.monotonic() - start) * 1000)
            failure = dict(error_class=e.error_class.value, latency_ms=latency_ms)
            if isinstance(e, LLMUpstreamError):
                failure.update(
                    status_code=e.status_code,
                    upstream_code=e.code,
                    upstream_class=e.upstream_class.value,
                )
            logger.error("llm.request.failed", **safe_kv(**base, outcome="error", **failure))
            raise

        usage = result.usage
        logger.info(
            "llm.request.finished",
            **safe_kv(
                **base,
                outcome="success",
                response_model=result.model,
                latency_ms=usage.latency_ms if usage else int((time.monotonic() - start) * 1000),
                tokens_input=usage.prompt_tokens if usage else None,
                tokens_output=usage.completion_tokens if usage else None,
                tokens_total=usage.total_tokens if usage else None,
                content_chars=len(result.content),
            ),
        )
        return result
