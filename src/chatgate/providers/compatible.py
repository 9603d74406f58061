"""
Generic OpenAI-compatible dialect for local and aggregator services.

Covers Ollama, LM Studio, LocalAI, vLLM, TGI, SGLang, OpenRouter, Together,
Groq, DeepSeek, SiliconFlow and custom endpoints. Aggregator presets already
carry ``/v1`` in their base URL, so the endpoint is normalised rather than
blindly appended.

The auth header depends on the provider preset:
  bearer   -> Authorization: Bearer <key>
  api-key  -> x-api-key: <key>
  none     -> no header
An empty key never produces a header.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chatgate.core.constants import COMPATIBLE_DEFAULT_TEMPERATURE
from chatgate.providers.base import (
    AuthType,
    HttpRequest,
    NormalizedMessage,
    chat_messages,
    json_headers,
)
from chatgate.providers.openai import extract_chat_text, fold_chat_event

if TYPE_CHECKING:
    from chatgate.core.settings import Settings


def strip_base(base_url: str) -> str:
    return base_url.rstrip("/")


def api_url(base_url: str, path: str) -> str:
    """``{base}/v1/{path}`` without doubling a ``/v1`` the base already ends in."""
    base = strip_base(base_url)
    if base.endswith("/v1"):
        return f"{base}/{path}"
    return f"{base}/v1/{path}"


def auth_headers(auth_type: AuthType, api_key: str) -> dict[str, str]:
    if not api_key:
        return {}
    if auth_type is AuthType.BEARER:
        return {"Authorization": f"Bearer {api_key}"}
    if auth_type is AuthType.API_KEY:
        return {"x-api-key": api_key}
    return {}


def build_request(
    messages: list[NormalizedMessage],
    settings: Settings,
    wants_stream: bool,
    *,
    auth_type: AuthType = AuthType.BEARER,
) -> HttpRequest:
    temperature = (
        settings.temperature
        if settings.temperature is not None
        else COMPATIBLE_DEFAULT_TEMPERATURE
    )
    body: dict[str, Any] = {
        "model": settings.model_id,
        "max_tokens": settings.max_tokens,
        "temperature": temperature,
        "stream": wants_stream,
        "messages": chat_messages(messages),
    }
    return HttpRequest(
        url=api_url(settings.base_url, "chat/completions"),
        headers=json_headers(auth_headers(auth_type, settings.active_api_key)),
        body=body,
    )


fold_event = fold_chat_event
extract_text = extract_chat_text
