"""
OpenAI dialects — Chat Completions and Responses.

Chat Completions (https://platform.openai.com/docs/api-reference/chat):
  POST {base}/v1/chat/completions
  Model quirks:
    - legacy models (gpt-3.5, plain gpt-4) take ``max_tokens``; everything
      newer takes ``max_completion_tokens``
    - reasoning models (o1, o3) reject ``temperature``, so it is omitted

Responses (https://platform.openai.com/docs/api-reference/responses), used by
the GPT-5 series:
  POST {base}/v1/responses
  The system message moves to a top-level ``instructions`` field, the rest
  of the conversation becomes ``input``, and the token cap is
  ``max_output_tokens``. No ``temperature`` is sent: the GPT-5 series only
  accepts the default. Streams ``response.output_text.delta`` events and a
  closing ``response.completed`` event carrying the full response object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

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


# ---------------------------------------------------------------------------
# Model quirks
# ---------------------------------------------------------------------------


def is_reasoning_model(model: str) -> bool:
    """o1/o3 family (including ``-o1``/``-o3`` suffixed ids): no temperature."""
    lower = model.lower()
    return (
        lower.startswith("o1")
        or lower.startswith("o3")
        or "-o1" in lower
        or "-o3" in lower
    )


def is_legacy_model(model: str) -> bool:
    """gpt-3.5 and base gpt-4 still take ``max_tokens``; gpt-4o and gpt-4-turbo do not."""
    lower = model.lower()
    if "gpt-3.5" in lower:
        return True
    return "gpt-4" in lower and "gpt-4o" not in lower and "gpt-4-turbo" not in lower


def _headers(settings: Settings) -> dict[str, str]:
    extra = {"Authorization": f"Bearer {settings.active_api_key}"}
    if settings.organization_id:
        extra["OpenAI-Organization"] = settings.organization_id
    if settings.project_id:
        extra["OpenAI-Project"] = settings.project_id
    return json_headers(extra)


# ---------------------------------------------------------------------------
# Chat Completions
# ---------------------------------------------------------------------------


def build_chat_request(
    messages: list[NormalizedMessage],
    settings: Settings,
    wants_stream: bool,
) -> HttpRequest:
    model = settings.model_id
    body: dict[str, Any] = {
        "model": model,
        "stream": wants_stream,
        "messages": chat_messages(messages),
    }
    if settings.max_tokens:
        token_field = "max_tokens" if is_legacy_model(model) else "max_completion_tokens"
        body[token_field] = settings.max_tokens
    if settings.temperature is not None and not is_reasoning_model(model):
        body["temperature"] = settings.temperature

    return HttpRequest(
        url=f"{settings.base_url}/v1/chat/completions",
        headers=_headers(settings),
        body=body,
    )


def fold_chat_event(event: dict[str, Any], text: str) -> str:
    return text + text_or_empty(dig(event, "choices", 0, "delta", "content"))


def extract_chat_text(data: Any) -> str:
    return text_or_empty(dig(data, "choices", 0, "message", "content"))


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def build_responses_request(
    messages: list[NormalizedMessage],
    settings: Settings,
    wants_stream: bool,
) -> HttpRequest:
    system = next((m for m in messages if m.role == "system"), None)
    conversation = [m for m in messages if m.role != "system"]

    # No temperature: Responses-API models only accept the default.
    body: dict[str, Any] = {
        "model": settings.model_id,
        "input": chat_messages(conversation),
        "max_output_tokens": settings.max_tokens,
        "stream": wants_stream,
    }
    if system is not None:
        body["instructions"] = system.content

    return HttpRequest(
        url=f"{settings.base_url}/v1/responses",
        headers=_headers(settings),
        body=body,
    )


def fold_responses_event(event: dict[str, Any], text: str) -> str:
    event_type = event.get("type")
    if event_type == "response.output_text.delta":
        return text + text_or_empty(event.get("delta"))
    if event_type == "response.completed":
        # Incremental deltas can under-report; the final object is authoritative.
        final = extract_responses_text(event.get("response") or {})
        if final and final != text:
            return final
    return text


def extract_responses_text(data: Any) -> str:
    """Text of the first ``output_text`` block of the first ``message`` output item."""
    output = dig(data, "output")
    if not isinstance(output, list):
        return ""
    message = next(
        (item for item in output if isinstance(item, dict) and item.get("type") == "message"),
        None,
    )
    if message is None:
        return ""
    content = message.get("content")
    if not isinstance(content, list):
        return ""
    block = next(
        (c for c in content if isinstance(c, dict) and c.get("type") == "output_text"),
        None,
    )
    return text_or_empty(block.get("text")) if block else ""
