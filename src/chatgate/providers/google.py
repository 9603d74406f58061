"""
Google Gemini dialect — Generative Language API.

Wire format (https://ai.google.dev/api/generate-content):
  POST {base}/v1beta/models/{model}:generateContent?key={api_key}
  No auth header; the key travels as a query parameter.
  body: {"contents": [{"role", "parts": [{"text"}]}],
         "generationConfig": {"maxOutputTokens"}}

Gemini has no ``assistant`` or ``system`` role: assistant turns become
``model`` and every other turn becomes ``user``. Calls are non-streaming; a
caller that asked for streaming gets the whole text in one sink call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from chatgate.providers.base import (
    HttpRequest,
    NormalizedMessage,
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
    contents = [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in messages
    ]
    body: dict[str, Any] = {
        "contents": contents,
        "generationConfig": {"maxOutputTokens": settings.max_tokens},
    }
    key = quote(settings.active_api_key, safe="")
    url = f"{settings.base_url}/v1beta/models/{settings.model_id}:generateContent?key={key}"
    return HttpRequest(url=url, headers=json_headers(), body=body)


def fold_event(event: dict[str, Any], text: str) -> str:
    # Only reached if a proxy in front of Gemini answers with SSE anyway.
    return text + text_or_empty(dig(event, "candidates", 0, "content", "parts", 0, "text"))


def extract_text(data: Any) -> str:
    return text_or_empty(dig(data, "candidates", 0, "content", "parts", 0, "text"))
