"""Usage accounting normalization.

Providers disagree on field names:
- OpenAI / xAI: prompt_tokens, completion_tokens, total_tokens
- Anthropic-style: input_tokens, output_tokens (no total)
- JS SDK proxies: promptTokens, completionTokens, totalTokens

normalize_usage folds them into UsageStats. An explicit total is kept as
reported; otherwise it is derived from prompt + completion when both are
numeric.
"""

from typing import Any

from recap.services.llm.types import UsageStats

PROMPT_TOKEN_FIELDS = ("prompt_tokens", "promptTokens", "input_tokens", "inputTokens")
COMPLETION_TOKEN_FIELDS = (
    "completion_tokens",
    "completionTokens",
    "output_tokens",
    "outputTokens",
)
TOTAL_TOKEN_FIELDS = ("total_tokens", "totalTokens")


def _first_present(raw: dict, names: tuple[str, ...]) -> Any:
    for name in names:
        value = raw.get(name)
        if value is not None:
            return value
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_usage(raw: Any, latency_ms: int | None) -> UsageStats | None:
    """Map a provider usage block (or None) onto UsageStats."""
    if not isinstance(raw, dict) or not raw:
        return UsageStats(latency_ms=latency_ms) if latency_ms is not None else None

    prompt_tokens = _first_present(raw, PROMPT_TOKEN_FIELDS)
    completion_tokens = _first_present(raw, COMPLETION_TOKEN_FIELDS)
    total_tokens = _first_present(raw, TOTAL_TOKEN_FIELDS)

    if total_tokens is None and _is_number(prompt_tokens) and _is_number(completion_tokens):
        total_tokens = prompt_tokens + completion_tokens

    return UsageStats(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
        latency_ms=latency_ms,
    )
