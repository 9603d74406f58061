"""
Anthropic Messages dialect.

Wire format (https://docs.anthropic.com/en/api/messages):
  POST {base}/v1/messages
  headers: x-api-key, anthropic-version
  body:    {"model", "max_tokens", "stream", "messages"}

Streaming deltas arrive as ``content_block_delta`` events carrying
``delta.text``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chatgate.core.constants import ANTHROPIC_API_VERSION
from chatgate.providers.base import (
    HttpRequest,
    NormalizedMessage,
    chat_messages,
    dig,
    json_headers,
    text_or_empty,
)

if TYPE_CHECKING:
    from chatgate.core.settings import Settings


def build_request(
    messages: list[NormalizedMessage],
    settings: Settings,
    wants_stream: bool,
) -> HttpRequest:
    headers = json_headers(
        {
            "x-api-key": settings.active_api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
    )
    body: dict[str, Any] = {
        "model": settings.model_id,
        "max_tokens": settings.max_tokens,
        "stream": wants_stream,
        "messages": chat_messages(messages),
    }
    return HttpRequest(url=f"{settings.base_url}/v1/messages", headers=headers, body=body)


def fold_event(event: dict[str, Any], text: str) -> str:
    if event.get("type") != "content_block_delta":
        return text
    return text + text_or_empty(dig(event, "delta", "text"))


def extract_text(data: Any) -> str:
    return text_or_empty(dig(data, "content", 0, "text"))
