"""Unit tests for chatgate.providers.sse — line buffering, folding, cancellation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from chatgate.core.exceptions import RequestCancelledError
from chatgate.providers.base import Dialect
from chatgate.providers.dialects import DIALECTS
from chatgate.providers.sse import (
    CancellationToken,
    SSELineBuffer,
    decode_stream,
    parse_data_line,
)

_ANTHROPIC = DIALECTS[Dialect.ANTHROPIC].fold_event
_CHAT = DIALECTS[Dialect.OPENAI_CHAT].fold_event
_RESPONSES = DIALECTS[Dialect.OPENAI_RESPONSES].fold_event


async def _chunks(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part


def _anthropic_delta(text: str) -> bytes:
    return (
        'data: {"type":"content_block_delta","index":0,'
        f'"delta":{{"type":"text_delta","text":"{text}"}}}}\n\n'
    ).encode()


# ---------------------------------------------------------------------------
# Line buffer
# ---------------------------------------------------------------------------


class TestSSELineBuffer:
    def test_keeps_partial_line(self) -> None:
        buf = SSELineBuffer()
        assert buf.feed(b"data: a") == []
        assert buf.feed(b"bc\ndata: d") == ["data: abc"]
        assert buf.flush() == ["data: d"]

    def test_strips_carriage_returns(self) -> None:
        buf = SSELineBuffer()
        assert buf.feed(b"data: x\r\n\r\n") == ["data: x", ""]

    def test_multibyte_split_across_chunks(self) -> None:
        encoded = "data: café\n".encode()
        buf = SSELineBuffer()
        assert buf.feed(encoded[:-2]) == []
        assert buf.feed(encoded[-2:]) == ["data: café"]

    def test_flush_empty(self) -> None:
        assert SSELineBuffer().flush() == []


class TestParseDataLine:
    def test_event(self) -> None:
        assert parse_data_line('data: {"a": 1}') == {"a": 1}

    def test_done_marker(self) -> None:
        assert parse_data_line("data: [DONE]") is None

    def test_non_data_lines(self) -> None:
        assert parse_data_line("event: message_start") is None
        assert parse_data_line(": keep-alive") is None
        assert parse_data_line("") is None

    def test_invalid_json(self) -> None:
        assert parse_data_line("data: {not json") is None

    def test_non_object_json(self) -> None:
        assert parse_data_line("data: [1, 2]") is None


# ---------------------------------------------------------------------------
# decode_stream
# ---------------------------------------------------------------------------


class TestDecodeStream:
    @pytest.mark.asyncio
    async def test_cumulative_snapshots(self) -> None:
        seen: list[str] = []
        text = await decode_stream(
            _chunks(_anthropic_delta("Hi"), _anthropic_delta(" there"), b"data: [DONE]\n\n"),
            _ANTHROPIC,
            seen.append,
        )
        assert seen == ["Hi", "Hi there"]
        assert text == "Hi there"

    @pytest.mark.asyncio
    async def test_malformed_line_is_skipped(self) -> None:
        seen: list[str] = []
        text = await decode_stream(
            _chunks(_anthropic_delta("A"), b"data: {broken\n\n", _anthropic_delta("B")),
            _ANTHROPIC,
            seen.append,
        )
        assert seen == ["A", "AB"]
        assert text == "AB"

    @pytest.mark.asyncio
    async def test_event_split_across_chunks(self) -> None:
        raw = _anthropic_delta("Hello") + _anthropic_delta(" world")
        pieces = [raw[i : i + 7] for i in range(0, len(raw), 7)]
        text = await decode_stream(_chunks(*pieces), _ANTHROPIC)
        assert text == "Hello world"

    @pytest.mark.asyncio
    async def test_trailing_line_without_newline(self) -> None:
        tail = b'data: {"choices":[{"delta":{"content":"end"}}]}'
        text = await decode_stream(_chunks(tail), _CHAT)
        assert text == "end"

    @pytest.mark.asyncio
    async def test_sink_not_called_for_empty_deltas(self) -> None:
        seen: list[str] = []
        await decode_stream(
            _chunks(
                b'data: {"choices":[{"delta":{"role":"assistant"}}]}\n\n',
                b'data: {"choices":[{"delta":{"content":"x"}}]}\n\n',
                b'data: {"choices":[{"delta":{}, "finish_reason":"stop"}]}\n\n',
            ),
            _CHAT,
            seen.append,
        )
        assert seen == ["x"]

    @pytest.mark.asyncio
    async def test_responses_completed_replaces_text(self) -> None:
        seen: list[str] = []
        text = await decode_stream(
            _chunks(
                b'data: {"type":"response.output_text.delta","delta":"Hel"}\n\n',
                b'data: {"type":"response.completed","response":{"output":[{"type":"message",'
                b'"content":[{"type":"output_text","text":"Hello!"}]}]}}\n\n',
            ),
            _RESPONSES,
            seen.append,
        )
        assert seen == ["Hel", "Hello!"]
        assert text == "Hello!"

    @pytest.mark.asyncio
    async def test_ignores_event_and_comment_lines(self) -> None:
        text = await decode_stream(
            _chunks(b"event: content_block_delta\n", b": ping\n", _anthropic_delta("ok")),
            _ANTHROPIC,
        )
        assert text == "ok"

    @pytest.mark.asyncio
    async def test_empty_stream(self) -> None:
        assert await decode_stream(_chunks(), _ANTHROPIC) == ""


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_token_state(self) -> None:
        token = CancellationToken()
        assert token.cancelled is False
        token.cancel()
        assert token.cancelled is True

    @pytest.mark.asyncio
    async def test_cancel_from_sink_stops_reading(self) -> None:
        token = CancellationToken()
        reads: list[int] = []

        async def source() -> AsyncIterator[bytes]:
            for i, part in enumerate((_anthropic_delta("a"), _anthropic_delta("b"))):
                reads.append(i)
                yield part

        def sink(text: str) -> None:
            token.cancel()

        with pytest.raises(RequestCancelledError):
            await decode_stream(source(), _ANTHROPIC, sink, token)
        assert reads == [0]

    @pytest.mark.asyncio
    async def test_cancel_interrupts_pending_read(self) -> None:
        token = CancellationToken()

        async def stalled() -> AsyncIterator[bytes]:
            yield _anthropic_delta("first")
            await asyncio.sleep(30)
            yield _anthropic_delta("never")

        asyncio.get_running_loop().call_later(0.05, token.cancel)
        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(decode_stream(stalled(), _ANTHROPIC, None, token), timeout=5)

    @pytest.mark.asyncio
    async def test_uncancelled_token_is_harmless(self) -> None:
        token = CancellationToken()
        text = await decode_stream(_chunks(_anthropic_delta("fine")), _ANTHROPIC, None, token)
        assert text == "fine"

    @pytest.mark.asyncio
    async def test_failing_sink_releases_cancel_waiter(self) -> None:
        token = CancellationToken()

        def sink(text: str) -> None:
            raise RuntimeError("renderer crashed")

        with pytest.raises(RuntimeError):
            await decode_stream(_chunks(_anthropic_delta("a")), _ANTHROPIC, sink, token)
        await asyncio.sleep(0)

        waiters = [
            task
            for task in asyncio.all_tasks()
            if not task.done() and "CancellationToken.wait" in repr(task.get_coro())
        ]
        assert waiters == []
