"""Chat-completions payload construction.

Request body:
{
  "model": "<resolved model>",
  "messages": [{"role": "user", "content": "<prompt>"}],
  "temperature": 0.2,                  # only when set
  "top_p": 0.9,                        # only when set
  "<max tokens field>": 512,           # only when set; name varies by provider
  "response_format": {                 # only when a schema is supplied
    "type": "json_schema",
    "json_schema": {"name": "<name>", "schema": {...}}
  }
}
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from recap.logging import get_logger
from recap.services.llm.errors import LLMValidationError
from recap.services.llm.schema import (
    XAI_UNSUPPORTED_SCHEMA_KEYS,
    SchemaConverter,
    resolve_schema_name,
    sanitize_schema,
    to_json_schema,
)
from recap.services.llm.types import GenerateParams

logger = get_logger(__name__)

DEFAULT_SAMPLING_FIELDS: Mapping[str, str] = {
    "temperature": "temperature",
    "top_p": "top_p",
    "max_output_tokens": "max_output_tokens",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class PayloadBuilder:
    """Maps GenerateParams onto one provider's request body.

    Attributes:
        provider: Provider name (for error attribution)
        default_model: Model used when params.model is None
        sampling_fields: GenerateParams attribute → provider field name
        banned_schema_keys: JSON-Schema keywords the provider rejects
        schema_converter: Descriptor → JSON-Schema collaborator
    """

    provider: str
    default_model: str
    sampling_fields: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SAMPLING_FIELDS))
    banned_schema_keys: Iterable[str] = XAI_UNSUPPORTED_SCHEMA_KEYS
    schema_converter: SchemaConverter = to_json_schema

    def build(self, params: GenerateParams) -> dict:
        """Build the request body for params."""
        payload: dict[str, Any] = {
            "model": params.model or self.default_model,
            "messages": [{"role": "user", "content": params.prompt}],
        }

        for attr, wire_name in self.sampling_fields.items():
            value = getattr(params, attr, None)
            if _is_number(value):
                payload[wire_name] = value

        if params.schema is not None:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": resolve_schema_name(params.schema_name),
                    "schema": sanitize_schema(
                        self._convert_schema(params.schema), self.banned_schema_keys
                    ),
                },
            }

        return payload

    def _convert_schema(self, descriptor: Any) -> dict:
        try:
            return self.schema_converter(descriptor)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "llm.schema.conversion_failed",
                provider=self.provider,
                error_type=type(e).__name__,
            )
            raise LLMValidationError(
                f"Failed to convert schema: {e}", provider=self.provider
            ) from e
