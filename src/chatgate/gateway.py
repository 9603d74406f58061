"""
Gateway — picks a dialect for the active model and runs the HTTP call.

Public entry points (all async, all take Settings explicitly)::

    await send_message(messages, settings, on_stream=None)   -> str
    await test_connection(settings)                          -> "success" | "Error: ..."
    await discover_models(base_url)                          -> list[str]
    await check_local_service_status(base_url)               -> ServiceStatus

Per-call lifecycle, logged under one ``request_id``::

    Idle -> Building -> Streaming(chunk)* | AwaitingResponse -> Completed | Failed

Dialect selection, first match wins:
  1. Responses API models (flagged in the catalog, or ``gpt-5*``)
  2. providers served by the generic OpenAI-compatible dialect, with that
     provider's auth rule
  3. the provider's own dialect (anthropic, openai-chat, google, minimax)
  4. anthropic
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

import httpx
import structlog

from chatgate.core.config import GatewayConfig
from chatgate.core.credentials import ensure_configured
from chatgate.core.exceptions import NetworkError, ProviderHTTPError
from chatgate.core.http import client_scope, error_message, redact
from chatgate.core.settings import Settings
from chatgate.probe import ServiceStatus, check_local_service_status, discover_models, is_reachable
from chatgate.providers.base import AuthType, Dialect, DialectSpec, NormalizedMessage
from chatgate.providers.dialects import DIALECTS, compatible_dialect
from chatgate.providers.registry import (
    COMPATIBLE_PROVIDERS,
    PROVIDER_PRESETS,
    provider_of,
    resolve,
    uses_responses_api,
)
from chatgate.providers.sse import CancellationToken, TextSink, decode_stream

logger = structlog.get_logger()

MessageInput = NormalizedMessage | Mapping[str, Any]


def select_dialect(model_id: str) -> DialectSpec:
    """Return the dialect that serves *model_id*."""
    if uses_responses_api(model_id):
        return DIALECTS[Dialect.OPENAI_RESPONSES]

    provider_id = provider_of(model_id)
    if provider_id in COMPATIBLE_PROVIDERS:
        return compatible_dialect(resolve(provider_id).auth_type)

    preset = PROVIDER_PRESETS.get(provider_id)
    if preset is not None and preset.dialect in DIALECTS:
        return DIALECTS[preset.dialect]

    return DIALECTS[Dialect.ANTHROPIC]


def _normalise(messages: Iterable[MessageInput]) -> list[NormalizedMessage]:
    return [
        m if isinstance(m, NormalizedMessage) else NormalizedMessage.from_dict(m)
        for m in messages
    ]


def _is_json(response: httpx.Response) -> bool:
    return "json" in response.headers.get("content-type", "").lower()


def _json_or_empty(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


async def send_message(
    messages: Iterable[MessageInput],
    settings: Settings,
    on_stream: TextSink | None = None,
    *,
    cancel: CancellationToken | None = None,
    client: httpx.AsyncClient | None = None,
    config: GatewayConfig | None = None,
) -> str:
    """Send a conversation and return the assistant's full reply text.

    With *on_stream*, the request asks for streaming and the sink receives
    the cumulative text after every delta. Dialects that answer with plain
    JSON call the sink once with the whole text.

    Raises:
        ConfigurationError: the provider needs an API key and none is set.
        ProviderHTTPError: the provider answered non-2xx.
        NetworkError: transport failure (DNS, refused, timeout).
        RequestCancelledError: *cancel* fired mid-stream.

    Text streamed before a failure is discarded, never returned.
    """
    cfg = config or GatewayConfig()
    ensure_configured(settings)

    spec = select_dialect(settings.model_id)
    wants_stream = on_stream is not None
    request = spec.build(_normalise(messages), settings, wants_stream)
    api_key = settings.active_api_key

    log = logger.bind(
        request_id=uuid.uuid4().hex[:8],
        dialect=spec.dialect.value,
        model=settings.model_id,
    )
    log.info("gateway_request_started", stream=wants_stream)

    try:
        async with client_scope(client, cfg.request_timeout_s) as http:
            async with http.stream(
                request.method,
                request.url,
                headers=request.headers,
                json=request.body,
                timeout=cfg.request_timeout_s,
            ) as resp:
                if not resp.is_success:
                    await resp.aread()
                    log.warning("gateway_request_failed", status=resp.status_code)
                    raise ProviderHTTPError(
                        resp.status_code, redact(error_message(resp), api_key)
                    )

                if wants_stream and not _is_json(resp):
                    log.debug("gateway_streaming")
                    text = await decode_stream(
                        resp.aiter_bytes(), spec.fold_event, on_stream, cancel
                    )
                else:
                    log.debug("gateway_awaiting_response")
                    await resp.aread()
                    text = spec.extract_text(_json_or_empty(resp))
                    if on_stream is not None and text:
                        on_stream(text)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log.warning("gateway_network_error", error=type(exc).__name__)
        message = redact(str(exc), api_key) or type(exc).__name__
        raise NetworkError(message) from exc

    log.info("gateway_request_completed", chars=len(text))
    return text


async def test_connection(
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
    config: GatewayConfig | None = None,
) -> str:
    """Send a tiny request; return ``"success"`` or ``"Error: <message>"``.

    Never raises.
    """
    cfg = config or GatewayConfig()
    spec = select_dialect(settings.model_id)
    provider = resolve(provider_of(settings.model_id))

    probe_settings = settings.model_copy(update={"max_tokens": cfg.test_max_tokens})
    try:
        if spec.dialect is Dialect.OPENAI_COMPATIBLE and provider.auth_type is AuthType.NONE:
            reachable = await is_reachable(
                settings.base_url, timeout=cfg.probe_timeout_s, client=client
            )
            if not reachable:
                logger.info("gateway_test_unreachable", base_url=settings.base_url)
                return (
                    f"Error: Cannot connect to {settings.base_url}. "
                    "Please ensure the service is running."
                )

        await send_message(
            [NormalizedMessage(role="user", content=cfg.test_prompt)],
            probe_settings,
            client=client,
            config=cfg,
        )
    except Exception as exc:  # noqa: BLE001
        logger.info("gateway_test_failed", model=settings.model_id, error=type(exc).__name__)
        message = redact(str(exc), settings.active_api_key) or "Unknown error"
        return f"Error: {message}"

    logger.info("gateway_test_succeeded", model=settings.model_id)
    return "success"


class Gateway:
    """Holds one shared httpx client and a GatewayConfig for repeated calls.

    The module-level functions open a client per call; a long-lived host
    should prefer one Gateway and close it on shutdown::

        async with Gateway(load_config()) as gw:
            text = await gw.send_message(messages, settings, on_stream=render)
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or GatewayConfig()
        self._client = client
        self._owns_client = client is None

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.request_timeout_s)
            self._owns_client = True
        return self._client

    async def send_message(
        self,
        messages: Iterable[MessageInput],
        settings: Settings,
        on_stream: TextSink | None = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> str:
        return await send_message(
            messages,
            settings,
            on_stream,
            cancel=cancel,
            client=self._ensure_client(),
            config=self._config,
        )

    async def test_connection(self, settings: Settings) -> str:
        return await test_connection(settings, client=self._ensure_client(), config=self._config)

    async def discover_models(self, base_url: str) -> list[str]:
        return await discover_models(base_url, client=self._ensure_client(), config=self._config)

    async def check_local_service_status(self, base_url: str) -> ServiceStatus:
        return await check_local_service_status(
            base_url, client=self._ensure_client(), config=self._config
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
