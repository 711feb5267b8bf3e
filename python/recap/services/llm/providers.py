"""Concrete chat-completions providers.

Grok (xAI):
- Endpoint: POST https://api.x.ai/v1/chat/completions
- Max tokens field: max_output_tokens
- Structured outputs reject length/count bounds and $schema

OpenAI:
- Endpoint: POST https://api.openai.com/v1/chat/completions
- Max tokens field: max_completion_tokens
- Structured outputs reject the $schema draft marker
"""

from recap.services.llm.adapter import ChatCompletionsAdapter
from recap.services.llm.schema import DRAFT_MARKER_KEYS, XAI_UNSUPPORTED_SCHEMA_KEYS


class GrokAdapter(ChatCompletionsAdapter):
    """xAI Grok adapter."""

    name = "grok"
    default_model = "grok-4-1-fast-non-reasoning"
    default_base_url = "https://api.x.ai/v1"
    credential_env = "XAI_API_KEY"
    banned_schema_keys = XAI_UNSUPPORTED_SCHEMA_KEYS


class OpenAIAdapter(ChatCompletionsAdapter):
    """OpenAI chat completions adapter."""

    name = "openai"
    default_model = "gpt-4o-mini"
    default_base_url = "https://api.openai.com/v1"
    credential_env = "OPENAI_API_KEY"
    sampling_fields = {
        "temperature": "temperature",
        "top_p": "top_p",
        "max_output_tokens": "max_completion_tokens",
    }
    banned_schema_keys = DRAFT_MARKER_KEYS


PROVIDERS: dict[str, type[ChatCompletionsAdapter]] = {
    GrokAdapter.name: GrokAdapter,
    OpenAIAdapter.name: OpenAIAdapter,
}
