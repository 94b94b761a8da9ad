"""
PromptMaster Backend - Improvement Decoder Tests
================================================

The decoder must never raise: malformed model output degrades to the raw
text with a generic critique.
"""

from promptmaster.services.response_decoder import (
    DEFAULT_CRITIQUE,
    FALLBACK_CRITIQUE,
    DecodeKind,
    decode_improvement,
    strip_code_fences,
)


class TestStripCodeFences:

    def test_removes_json_fence(self):
        raw = '```json\n{"critique": "x"}\n```'
        assert strip_code_fences(raw) == '{"critique": "x"}'

    def test_removes_plain_fence_and_whitespace(self):
        assert strip_code_fences("  ```\nhello\n```  ") == "hello"

    def test_none_becomes_empty(self):
        assert strip_code_fences(None) == ""


class TestDecodeImprovement:

    def test_structured_object(self):
        raw = '{"critique": "Too vague.", "improvedPrompt": "List three causes of inflation."}'
        result = decode_improvement(raw)

        assert result.kind is DecodeKind.STRUCTURED
        assert result.is_structured
        assert result.critique == "Too vague."
        assert result.improved_prompt == "List three causes of inflation."

    def test_fenced_object_is_structured(self):
        raw = '```json\n{"critique": "Needs context.", "improvedPrompt": "Better prompt"}\n```'
        result = decode_improvement(raw)

        assert result.kind is DecodeKind.STRUCTURED
        assert result.improved_prompt == "Better prompt"

    def test_missing_critique_gets_default(self):
        result = decode_improvement('{"improvedPrompt": "Better prompt"}')

        assert result.kind is DecodeKind.STRUCTURED
        assert result.critique == DEFAULT_CRITIQUE

    def test_missing_improved_prompt_falls_back_to_cleaned_text(self):
        raw = '{"critique": "Only a critique"}'
        result = decode_improvement(raw)

        assert result.kind is DecodeKind.STRUCTURED
        assert result.improved_prompt == raw

    def test_plain_text_is_raw(self):
        raw = "Here is a better prompt: describe the water cycle step by step."
        result = decode_improvement(raw)

        assert result.kind is DecodeKind.RAW
        assert not result.is_structured
        assert result.critique == FALLBACK_CRITIQUE
        assert result.improved_prompt == raw

    def test_truncated_json_is_raw(self):
        raw = '```json\n{"critique": "cut off'
        result = decode_improvement(raw)

        assert result.kind is DecodeKind.RAW
        assert result.improved_prompt == '{"critique": "cut off'

    def test_json_array_is_raw(self):
        result = decode_improvement('["not", "an", "object"]')

        assert result.kind is DecodeKind.RAW
        assert result.critique == FALLBACK_CRITIQUE

    def test_non_string_fields_are_ignored(self):
        result = decode_improvement('{"critique": 42, "improvedPrompt": null}')

        assert result.kind is DecodeKind.STRUCTURED
        assert result.critique == DEFAULT_CRITIQUE
        assert result.improved_prompt == '{"critique": 42, "improvedPrompt": null}'
