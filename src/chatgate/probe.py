"""
Service probe — reachability and model discovery for local inference servers.

Two listing conventions are tried in order:

  1. OpenAI style:  GET {base}/v1/models  -> {"data": [{"id": ...}]}
  2. Ollama style:  GET {root}/api/tags   -> {"models": [{"name": ...}]}

where ``root`` is the base URL without a trailing ``/v1``. Nothing here
raises on network trouble: an unreachable service is simply "not running"
with no models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from chatgate.core.config import GatewayConfig
from chatgate.core.http import client_scope
from chatgate.providers.compatible import api_url, strip_base

logger = structlog.get_logger()


@dataclass
class ServiceStatus:
    running: bool
    models: list[str] = field(default_factory=list)


def _root_url(base_url: str) -> str:
    return strip_base(base_url).removesuffix("/v1")


def _names(items: Any, key: str) -> list[str]:
    if not isinstance(items, list):
        return []
    return [
        item[key] for item in items if isinstance(item, dict) and isinstance(item.get(key), str)
    ]


async def _get_json(client: httpx.AsyncClient, url: str, timeout: float) -> Any | None:
    """Body of a 2xx JSON GET, else None."""
    try:
        resp = await client.get(url, timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("probe_request_failed", url=url, error=type(exc).__name__)
        return None
    if not resp.is_success:
        logger.debug("probe_request_rejected", url=url, status=resp.status_code)
        return None
    try:
        return resp.json()
    except ValueError:
        logger.debug("probe_invalid_json", url=url)
        return None


async def discover_models(
    base_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    config: GatewayConfig | None = None,
) -> list[str]:
    """List model ids served at *base_url*; ``[]`` if neither convention answers."""
    cfg = config or GatewayConfig()
    async with client_scope(client, cfg.request_timeout_s) as http:
        data = await _get_json(http, api_url(base_url, "models"), cfg.request_timeout_s)
        if data is not None:
            models = _names(data.get("data") if isinstance(data, dict) else None, "id")
            logger.info(
                "probe_models_discovered", base_url=base_url, style="openai", count=len(models)
            )
            return models

        data = await _get_json(http, f"{_root_url(base_url)}/api/tags", cfg.request_timeout_s)
        if data is not None:
            models = _names(data.get("models") if isinstance(data, dict) else None, "name")
            logger.info(
                "probe_models_discovered", base_url=base_url, style="ollama", count=len(models)
            )
            return models

    logger.info("probe_no_models", base_url=base_url)
    return []


async def is_reachable(
    base_url: str,
    *,
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """True if either listing endpoint answers 2xx within *timeout*."""
    async with client_scope(client, timeout) as http:
        for url in (api_url(base_url, "models"), f"{_root_url(base_url)}/api/tags"):
            try:
                resp = await http.get(url, timeout=timeout)
            except (httpx.HTTPError, httpx.InvalidURL):
                continue
            if resp.is_success:
                return True
    return False


async def check_local_service_status(
    base_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    config: GatewayConfig | None = None,
) -> ServiceStatus:
    cfg = config or GatewayConfig()
    models = await discover_models(base_url, client=client, config=cfg)
    running = bool(models) or await is_reachable(
        base_url, timeout=cfg.status_timeout_s, client=client
    )
    return ServiceStatus(running=running, models=models)
