"""
Server-Sent-Events decoding into cumulative text snapshots.

Every vendor that streams chat output uses the same framing::

    data: {...json event...}\\n
    \\n
    data: [DONE]\\n

Bytes arrive in arbitrary chunks, so a line buffer is kept across reads and
only complete lines are parsed. Each dialect contributes a ``fold_event``
function that turns (event, text so far) into the new text; the decoder calls
the caller's sink with the full text every time it changes, never with a bare
fragment.

Recovery rules:
  - a line that is not ``data: ...`` is ignored (``event:``, ``id:``, blanks)
  - ``data: [DONE]`` is a no-op end marker
  - a ``data:`` line that is not valid JSON is skipped on its own; decoding
    continues with the next line
"""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import structlog

from chatgate.core.exceptions import RequestCancelledError
from chatgate.providers.base import FoldFn

logger = structlog.get_logger()

_DATA_PREFIX = "data: "
_DONE = "[DONE]"

TextSink = Callable[[str], Any]


class CancellationToken:
    """Lets a caller abandon a streaming call and release its connection.

    Pass the same token to ``send_message`` and call :meth:`cancel` from
    anywhere on the event loop; the pending chunk read is interrupted at once.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class SSELineBuffer:
    """Incremental bytes → complete text lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> list[str]:
        self._pending += self._decoder.decode(chunk)
        *lines, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> list[str]:
        tail = (self._pending + self._decoder.decode(b"", final=True)).rstrip("\r")
        self._pending = ""
        return [tail] if tail else []


def parse_data_line(line: str) -> dict[str, Any] | None:
    """Return the JSON event carried by one SSE line, or None if there is none."""
    if not line.startswith(_DATA_PREFIX):
        return None
    payload = line[len(_DATA_PREFIX) :]
    if payload == _DONE:
        return None
    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("sse_line_skipped", reason="invalid_json", length=len(payload))
        return None
    if not isinstance(event, dict):
        return None
    return event


async def _cancellable(
    chunks: AsyncIterator[bytes],
    cancel: CancellationToken | None,
) -> AsyncIterator[bytes]:
    """Yield from *chunks*, racing every read against *cancel*."""
    if cancel is None:
        async for chunk in chunks:
            yield chunk
        return

    iterator = chunks.__aiter__()
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        while True:
            if cancel.cancelled:
                raise RequestCancelledError("Request cancelled")
            pending_read = asyncio.ensure_future(iterator.__anext__())
            done, _ = await asyncio.wait(
                {pending_read, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
            if pending_read not in done:
                pending_read.cancel()
                await asyncio.gather(pending_read, return_exceptions=True)
                raise RequestCancelledError("Request cancelled")
            try:
                chunk = pending_read.result()
            except StopAsyncIteration:
                return
            yield chunk
    finally:
        waiter.cancel()


async def decode_stream(
    chunks: AsyncIterator[bytes],
    fold_event: FoldFn,
    on_text: TextSink | None = None,
    cancel: CancellationToken | None = None,
) -> str:
    """Consume an SSE byte stream and return the final cumulative text.

    *on_text* is invoked synchronously, in arrival order, each time the
    cumulative text changes. Raises :class:`RequestCancelledError` if *cancel*
    fires before the stream ends.
    """
    text = ""
    lines = SSELineBuffer()

    def _apply(line: str) -> None:
        nonlocal text
        event = parse_data_line(line)
        if event is None:
            return
        updated = fold_event(event, text)
        if updated != text:
            text = updated
            if on_text is not None:
                on_text(text)

    async with contextlib.aclosing(_cancellable(chunks, cancel)) as stream:
        async for chunk in stream:
            for line in lines.feed(chunk):
                _apply(line)

    for line in lines.flush():
        _apply(line)

    return text
