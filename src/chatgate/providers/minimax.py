"""
Minimax dialect — chatcompletion_v2.

  POST {base}/v1/text/chatcompletion_v2
  Authorization: Bearer <key>
  body: {"model", "max_tokens", "stream", "messages"}

Responses and stream deltas use the OpenAI chat shape, so folding and
extraction are shared with :mod:`chatgate.providers.openai`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chatgate.providers.base import HttpRequest, NormalizedMessage, chat_messages, json_headers
from chatgate.providers.openai import extract_chat_text, fold_chat_event

if TYPE_CHECKING:
    from chatgate.core.settings import Settings


def build_request(
    messages: list[NormalizedMessage],
    settings: Settings,
    wants_stream: bool,
) -> HttpRequest:
    body: dict[str, Any] = {
        "model": settings.model_id,
        "max_tokens": settings.max_tokens,
        "stream": wants_stream,
        "messages": chat_messages(messages),
    }
    return HttpRequest(
        url=f"{settings.base_url}/v1/text/chatcompletion_v2",
        headers=json_headers({"Authorization": f"Bearer {settings.active_api_key}"}),
        body=body,
    )


fold_event = fold_chat_event
extract_text = extract_chat_text
