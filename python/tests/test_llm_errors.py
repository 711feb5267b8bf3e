"""Tests for the LLM error taxonomy and structured-output decoding."""

import inspect

import pytest

from recap.services.llm import (
    GenerateResult,
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


class TestErrorClasses:
    """Each failure mode maps to exactly one error class."""

    @pytest.mark.parametrize(
        "exc_type, error_class",
        [
            (LLMConfigurationError, LLMErrorClass.CONFIGURATION),
            (LLMValidationError, LLMErrorClass.SCHEMA_INVALID),
            (LLMTransportError, LLMErrorClass.TRANSPORT),
            (LLMTimeoutError, LLMErrorClass.TIMEOUT),
            (LLMEmptyResponseError, LLMErrorClass.EMPTY_RESPONSE),
        ],
    )
    def test_error_class(self, exc_type, error_class):
        err = exc_type("boom", provider="grok")
        assert isinstance(err, LLMError)
        assert err.error_class == error_class
        assert err.message == "boom"
        assert err.provider == "grok"
        assert str(err) == "boom"

    def test_upstream_error_fields(self):
        err = LLMUpstreamError(
            "grok API error (rate_limited): slow down",
            status_code=429,
            code="rate_limited",
            provider="grok",
        )
        assert err.error_class == LLMErrorClass.UPSTREAM
        assert err.status_code == 429
        assert err.code == "rate_limited"
        assert err.upstream_class == UpstreamErrorClass.RATE_LIMIT

    def test_upstream_class_override(self):
        err = LLMUpstreamError(
            "x", status_code=500, upstream_class=UpstreamErrorClass.BAD_REQUEST
        )
        assert err.upstream_class == UpstreamErrorClass.BAD_REQUEST

    def test_upstream_class_annotation_is_resolved(self):
        param = inspect.signature(LLMUpstreamError).parameters["upstream_class"]
        assert param.annotation == (UpstreamErrorClass | None)


class TestClassifyUpstreamError:
    """Tests for classify_upstream_error."""

    @pytest.mark.parametrize(
        "status, code, message, expected",
        [
            (401, None, "Incorrect API key", UpstreamErrorClass.INVALID_KEY),
            (403, None, None, UpstreamErrorClass.INVALID_KEY),
            (429, "rate_limited", "slow down", UpstreamErrorClass.RATE_LIMIT),
            (404, None, "no such route", UpstreamErrorClass.MODEL_NOT_AVAILABLE),
            (500, None, None, UpstreamErrorClass.PROVIDER_DOWN),
            (503, None, "maximum context length", UpstreamErrorClass.PROVIDER_DOWN),
            (400, "context_length_exceeded", "too long", UpstreamErrorClass.CONTEXT_TOO_LARGE),
            (
                400,
                None,
                "This model's maximum context length is 8192 tokens",
                UpstreamErrorClass.CONTEXT_TOO_LARGE,
            ),
            (413, None, None, UpstreamErrorClass.CONTEXT_TOO_LARGE),
            (400, None, "The model `grok-9` was not found", UpstreamErrorClass.MODEL_NOT_AVAILABLE),
            (400, None, "temperature out of range", UpstreamErrorClass.BAD_REQUEST),
            (422, None, None, UpstreamErrorClass.BAD_REQUEST),
        ],
    )
    def test_classification(self, status, code, message, expected):
        assert classify_upstream_error(status, code, message) == expected


class TestParseJson:
    """Tests for GenerateResult.parse_json."""

    def _result(self, content: str) -> GenerateResult:
        return GenerateResult(content=content, raw_response={}, provider="grok", model="m1")

    def test_valid_json(self):
        assert self._result('{"a": 1, "b": [true]}').parse_json() == {"a": 1, "b": [True]}

    def test_invalid_json(self):
        with pytest.raises(LLMValidationError) as exc_info:
            self._result("not json").parse_json()

        assert exc_info.value.error_class == LLMErrorClass.SCHEMA_INVALID
        assert exc_info.value.provider == "grok"
