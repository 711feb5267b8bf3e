"""Structured-output schema handling.

Two pieces:
- to_json_schema: turns a schema descriptor into a JSON-Schema document.
  Descriptors are pydantic models (or anything pydantic's TypeAdapter can
  describe); a plain dict is treated as an already-built JSON Schema.
- sanitize_schema: strips keywords a provider's structured-output validator
  rejects, at every depth, without touching the input.
"""

import copy
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import TypeAdapter

SchemaConverter = Callable[[Any], dict]

# Keywords rejected by xAI structured outputs.
# See: https://docs.x.ai/docs/guides/structured-outputs
XAI_UNSUPPORTED_SCHEMA_KEYS = frozenset(
    {
        "minLength",
        "maxLength",
        "minItems",
        "maxItems",
        "minContains",
        "maxContains",
        "$schema",
    }
)

DRAFT_MARKER_KEYS = frozenset({"$schema"})

DEFAULT_SCHEMA_NAME = "ResponseSchema"


def to_json_schema(descriptor: Any) -> dict:
    """Convert a schema descriptor into a JSON-Schema document.

    Raises whatever pydantic raises for types it cannot describe; callers
    classify the failure.
    """
    if isinstance(descriptor, dict):
        return copy.deepcopy(descriptor)
    return TypeAdapter(descriptor).json_schema()


def sanitize_schema(schema: Any, banned_keys: Iterable[str] = XAI_UNSUPPORTED_SCHEMA_KEYS) -> Any:
    """Return a deep copy of schema with every banned key removed.

    Recurses through dicts and lists (e.g. anyOf/prefixItems). Scalars are
    returned unchanged. Idempotent.
    """
    banned = banned_keys if isinstance(banned_keys, frozenset) else frozenset(banned_keys)
    return _strip(schema, banned)


def _strip(node: Any, banned: frozenset) -> Any:
    if isinstance(node, dict):
        return {key: _strip(value, banned) for key, value in node.items() if key not in banned}
    if isinstance(node, list):
        return [_strip(item, banned) for item in node]
    return node


def resolve_schema_name(name: str | None) -> str:
    """Trim the caller's schema label, falling back to DEFAULT_SCHEMA_NAME."""
    if name and name.strip():
        return name.strip()
    return DEFAULT_SCHEMA_NAME
