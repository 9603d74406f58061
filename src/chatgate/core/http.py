"""httpx plumbing shared by the gateway and the service probe."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx


@asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None,
    timeout: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client if given, else a throwaway one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


def error_message(response: httpx.Response) -> str:
    """Vendor error text from an ``{"error": {"message": ...}}`` envelope.

    Falls back to ``API error: <status>`` when the body is not JSON or has no
    such field. The response body must already be read.
    """
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
    return f"API error: {response.status_code}"


def redact(message: str, secret: str) -> str:
    """Remove *secret* from *message* (httpx errors can echo the request URL)."""
    if secret and secret in message:
        return message.replace(secret, "[REDACTED]")
    return message
