"""Unit tests for non-streaming response extraction and per-dialect event folding."""

from __future__ import annotations

import pytest

from chatgate.providers.base import Dialect, dig
from chatgate.providers.dialects import DIALECTS


class TestExtractText:
    def test_anthropic(self) -> None:
        data = {"content": [{"type": "text", "text": "Hello"}]}
        assert DIALECTS[Dialect.ANTHROPIC].extract_text(data) == "Hello"

    def test_openai_chat(self) -> None:
        data = {"choices": [{"message": {"role": "assistant", "content": "Hi"}}]}
        assert DIALECTS[Dialect.OPENAI_CHAT].extract_text(data) == "Hi"

    def test_compatible_and_minimax_share_chat_shape(self) -> None:
        data = {"choices": [{"message": {"content": "ok"}}]}
        assert DIALECTS[Dialect.OPENAI_COMPATIBLE].extract_text(data) == "ok"
        assert DIALECTS[Dialect.MINIMAX].extract_text(data) == "ok"

    def test_google(self) -> None:
        data = {"candidates": [{"content": {"parts": [{"text": "Gemini says hi"}]}}]}
        assert DIALECTS[Dialect.GOOGLE].extract_text(data) == "Gemini says hi"

    def test_responses_skips_reasoning_items(self) -> None:
        data = {
            "output": [
                {"type": "reasoning", "summary": []},
                {
                    "type": "message",
                    "content": [
                        {"type": "refusal", "refusal": "no"},
                        {"type": "output_text", "text": "Answer"},
                    ],
                },
            ]
        }
        assert DIALECTS[Dialect.OPENAI_RESPONSES].extract_text(data) == "Answer"

    @pytest.mark.parametrize("dialect", list(Dialect))
    @pytest.mark.parametrize(
        "data",
        [
            {},
            None,
            [],
            "not a dict",
            {"content": []},
            {"choices": [{}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"output": [{"type": "message", "content": None}]},
        ],
    )
    def test_missing_fields_give_empty_string(self, dialect: Dialect, data: object) -> None:
        assert DIALECTS[dialect].extract_text(data) == ""


class TestFoldEvent:
    def test_anthropic_ignores_other_events(self) -> None:
        fold = DIALECTS[Dialect.ANTHROPIC].fold_event
        assert fold({"type": "message_start", "message": {}}, "x") == "x"
        assert fold({"type": "content_block_delta", "delta": {"text": "y"}}, "x") == "xy"

    def test_chat_delta_without_content(self) -> None:
        fold = DIALECTS[Dialect.OPENAI_CHAT].fold_event
        assert fold({"choices": [{"delta": {"role": "assistant"}}]}, "") == ""
        assert fold({"choices": [{"delta": {"content": "a"}}]}, "") == "a"

    def test_responses_delta_and_completed(self) -> None:
        fold = DIALECTS[Dialect.OPENAI_RESPONSES].fold_event
        text = fold({"type": "response.output_text.delta", "delta": "Hel"}, "")
        assert text == "Hel"
        completed = {
            "type": "response.completed",
            "response": {
                "output": [
                    {"type": "message", "content": [{"type": "output_text", "text": "Hello"}]}
                ]
            },
        }
        assert fold(completed, text) == "Hello"

    def test_responses_completed_without_text_keeps_accumulated(self) -> None:
        fold = DIALECTS[Dialect.OPENAI_RESPONSES].fold_event
        assert fold({"type": "response.completed", "response": {"output": []}}, "kept") == "kept"


class TestDig:
    def test_walks_dicts_and_lists(self) -> None:
        assert dig({"a": [{"b": 1}]}, "a", 0, "b") == 1

    def test_out_of_range_index(self) -> None:
        assert dig({"a": []}, "a", 0) is None

    def test_type_mismatch(self) -> None:
        assert dig({"a": "str"}, "a", "b") is None
        assert dig([1], "a") is None
