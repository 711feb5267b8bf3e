"""Tests for assistant text extraction and usage normalization."""

import pytest

from recap.services.llm import UsageStats, extract_text, normalize_usage
from recap.services.llm.extract import EXTRACTION_STRATEGIES, content_parts, string_content


class TestExtractText:
    """Tests for extract_text strategy ordering."""

    def test_string_content(self):
        assert extract_text({"message": {"content": "hello"}}) == "hello"

    def test_parts_skip_non_text(self):
        choice = {"message": {"content": [{"type": "x"}, {"text": "hi"}]}}
        assert extract_text(choice) == "hi"

    def test_empty_parts_without_text_field(self):
        assert extract_text({"message": {"content": []}}) == ""

    def test_first_match_wins(self):
        choice = {"message": {"content": [{"text": "first"}, {"text": "second"}]}}
        assert extract_text(choice) == "first"

    def test_bare_string_part(self):
        choice = {"message": {"content": [None, "plain", {"text": "later"}]}}
        assert extract_text(choice) == "plain"

    def test_empty_string_part_skipped(self):
        choice = {"message": {"content": ["", "hello"]}}
        assert extract_text(choice) == "hello"

    def test_only_empty_string_parts(self):
        assert extract_text({"message": {"content": ["", ""]}}) == ""

    @pytest.mark.parametrize(
        ("part", "expected"),
        [
            ({"type": "output_text", "output_text": "o"}, "o"),
            ({"type": "blob", "data": "d"}, "d"),
            ({"text": "t", "output_text": "o", "data": "d"}, "t"),
            ({"output_text": "o", "data": "d"}, "o"),
        ],
    )
    def test_part_field_precedence(self, part, expected):
        assert extract_text({"message": {"content": [part]}}) == expected

    def test_non_string_text_in_part_ignored(self):
        choice = {"message": {"content": [{"text": 42}, {"data": "ok"}]}}
        assert extract_text(choice) == "ok"

    def test_message_text_fallback(self):
        choice = {"message": {"content": [{"type": "image"}], "text": "caption"}}
        assert extract_text(choice) == "caption"

    def test_message_text_without_content(self):
        assert extract_text({"message": {"text": "legacy"}}) == "legacy"

    def test_delta_used_when_no_message(self):
        assert extract_text({"delta": {"content": "streamed"}}) == "streamed"

    def test_message_preferred_over_delta(self):
        choice = {"message": {"content": "full"}, "delta": {"content": "partial"}}
        assert extract_text(choice) == "full"

    def test_empty_string_content_returned_as_is(self):
        choice = {"message": {"content": "", "text": "ignored"}}
        assert extract_text(choice) == ""

    @pytest.mark.parametrize("choice", [None, {}, [], "text", {"message": None}, {"message": 5}])
    def test_missing_or_malformed_choice(self, choice):
        assert extract_text(choice) == ""

    def test_strategies_are_ordered(self):
        assert EXTRACTION_STRATEGIES[:2] == (string_content, content_parts)

    def test_custom_strategy_appended(self):
        def refusal(message: dict) -> str | None:
            value = message.get("refusal")
            return value if isinstance(value, str) else None

        choice = {"message": {"content": None, "refusal": "cannot help"}}

        assert extract_text(choice) == ""
        assert extract_text(choice, EXTRACTION_STRATEGIES + (refusal,)) == "cannot help"


class TestNormalizeUsage:
    """Tests for normalize_usage."""

    def test_derives_total(self):
        usage = normalize_usage({"prompt_tokens": 10, "completion_tokens": 5}, 42)
        assert usage == UsageStats(
            prompt_tokens=10, completion_tokens=5, total_tokens=15, latency_ms=42
        )

    def test_explicit_total_wins(self):
        usage = normalize_usage(
            {"total_tokens": 99, "prompt_tokens": 10, "completion_tokens": 5}, 42
        )
        assert usage.total_tokens == 99
        assert usage.latency_ms == 42

    def test_camel_case_fields(self):
        usage = normalize_usage({"promptTokens": 3, "completionTokens": 4, "totalTokens": 8}, 1)
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (3, 4, 8)

    def test_input_output_fields(self):
        usage = normalize_usage({"input_tokens": 7, "output_tokens": 2}, None)
        assert usage == UsageStats(prompt_tokens=7, completion_tokens=2, total_tokens=9)

    def test_snake_case_preferred_over_camel_case(self):
        usage = normalize_usage({"prompt_tokens": 1, "promptTokens": 100}, None)
        assert usage.prompt_tokens == 1

    def test_total_absent_when_counts_incomplete(self):
        usage = normalize_usage({"prompt_tokens": 10}, 5)
        assert usage.total_tokens is None
        assert usage.completion_tokens is None
        assert usage.latency_ms == 5

    def test_total_absent_when_counts_not_numeric(self):
        usage = normalize_usage({"prompt_tokens": "10", "completion_tokens": 5}, 5)
        assert usage.total_tokens is None

    def test_absent_usage_with_latency(self):
        assert normalize_usage(None, 30) == UsageStats(latency_ms=30)

    def test_absent_usage_with_zero_latency(self):
        assert normalize_usage(None, 0) == UsageStats(latency_ms=0)

    def test_absent_usage_without_latency(self):
        assert normalize_usage(None, None) is None

    def test_latency_attached_without_token_counts(self):
        usage = normalize_usage({"cached": True}, 12)
        assert usage == UsageStats(latency_ms=12)
