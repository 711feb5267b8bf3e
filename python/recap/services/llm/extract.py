"""Assistant text extraction from a chat-completions choice.

Providers encode the assistant's output differently:
- plain:      {"message": {"content": "text"}}
- multimodal: {"message": {"content": [{"type": "output_text", "text": "..."}]}}
- streamed:   {"delta": {"content": "..."}}
- legacy:     {"message": {"text": "..."}}

Each shape is handled by a small strategy. Strategies run in order and the
first one returning a string wins. Support for a new shape is a matter of
appending a strategy to EXTRACTION_STRATEGIES.
"""

from collections.abc import Callable
from typing import Any

TEXT_PART_FIELDS = ("text", "output_text", "data")

ExtractionStrategy = Callable[[dict], str | None]


def _message_of(choice: Any) -> dict:
    if not isinstance(choice, dict):
        return {}
    message = choice.get("message")
    if message is None:
        message = choice.get("delta")
    return message if isinstance(message, dict) else {}


def string_content(message: dict) -> str | None:
    """content is a plain string."""
    content = message.get("content")
    return content if isinstance(content, str) else None


def content_parts(message: dict) -> str | None:
    """content is a list of parts; the first textual part wins."""
    content = message.get("content")
    if not isinstance(content, list):
        return None

    for part in content:
        if isinstance(part, str):
            if part:
                return part
            continue
        if not isinstance(part, dict):
            continue
        for name in TEXT_PART_FIELDS:
            value = part.get(name)
            if isinstance(value, str):
                return value
    return None


def message_text(message: dict) -> str | None:
    """message carries a top-level text field."""
    text = message.get("text")
    return text if isinstance(text, str) else None


EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    string_content,
    content_parts,
    message_text,
)


def extract_text(
    choice: Any,
    strategies: tuple[ExtractionStrategy, ...] = EXTRACTION_STRATEGIES,
) -> str:
    """Return the assistant text of a choice, or "" when none can be found."""
    message = _message_of(choice)
    for strategy in strategies:
        text = strategy(message)
        if text is not None:
            return text
    return ""
