"""Factory for provider adapters.

Credentials come from Settings and are handed to the adapter constructor,
which fails fast when one is missing.
"""

import httpx

from recap.config import Settings, get_settings
from recap.services.llm.adapter import ChatCompletionsAdapter
from recap.services.llm.errors import LLMConfigurationError
from recap.services.llm.providers import PROVIDERS


def build_adapter(
    provider: str,
    client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> ChatCompletionsAdapter:
    """Build the adapter for provider from settings.

    Providers:
    - grok (XAI_API_KEY, XAI_API_BASE_URL)
    - openai (OPENAI_API_KEY, OPENAI_API_BASE_URL)

    Extend by adding a ChatCompletionsAdapter subclass to PROVIDERS and its
    credential to Settings.

    Raises:
        LLMConfigurationError: Unknown provider or missing credential.
    """
    settings = settings or get_settings()
    p = provider.lower().strip()

    adapter_cls = PROVIDERS.get(p)
    if adapter_cls is None:
        raise LLMConfigurationError(f"Unknown LLM provider: {provider}", provider=provider)

    return adapter_cls(
        client,
        api_key=settings.api_key_for(p),
        base_url=settings.base_url_for(p),
    )
