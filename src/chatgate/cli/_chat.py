"""chatgate discover / status / test / send — commands that talk to a provider."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.table import Table

from chatgate.core.config import GatewayConfig
from chatgate.core.exceptions import ChatGateError
from chatgate.core.settings import Settings
from chatgate.providers.base import NormalizedMessage
from chatgate.providers.registry import default_base_url


def _settings(
    model_id: str,
    api_key: str,
    base_url: str,
    *,
    max_tokens: int = 4096,
    temperature: float | None = None,
) -> Settings:
    update: dict = {
        "model_id": model_id,
        "active_api_key": api_key,
        "base_url": base_url or default_base_url(model_id),
        "max_tokens": max_tokens,
    }
    if temperature is not None:
        update["temperature"] = temperature
    return Settings(**update)


def cmd_discover(base_url: str, config: GatewayConfig, console: Console) -> None:
    from chatgate.probe import discover_models

    names = asyncio.run(discover_models(base_url, config=config))
    if not names:
        console.print(f"[dim]No models found at {base_url}.[/dim]")
        return
    for name in names:
        console.print(name)


def cmd_status(base_url: str, config: GatewayConfig, console: Console) -> None:
    from chatgate.probe import check_local_service_status

    status = asyncio.run(check_local_service_status(base_url, config=config))
    if not status.running:
        console.print(f"[red]Not running:[/red] {base_url}")
        raise SystemExit(1)

    console.print(f"[green]Running:[/green] {base_url}")
    if status.models:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Model", style="cyan")
        for name in status.models:
            table.add_row(name)
        console.print(table)
    else:
        console.print("[dim]No models listed.[/dim]")


def cmd_test(
    model_id: str,
    api_key: str,
    base_url: str,
    config: GatewayConfig,
    console: Console,
) -> None:
    from chatgate.gateway import test_connection

    settings = _settings(model_id, api_key, base_url)
    result = asyncio.run(test_connection(settings, config=config))
    if result == "success":
        console.print(f"[green]Connection OK:[/green] {model_id} at {settings.base_url}")
        return
    console.print(f"[red]Connection failed:[/red] {model_id} — {result}")
    raise SystemExit(1)


def cmd_send(
    prompt: str,
    model_id: str,
    api_key: str,
    base_url: str,
    max_tokens: int,
    temperature: float | None,
    system_prompt: str,
    stream: bool,
    config: GatewayConfig,
    console: Console,
    err_console: Console,
) -> None:
    from chatgate.gateway import send_message

    settings = _settings(
        model_id, api_key, base_url, max_tokens=max_tokens, temperature=temperature
    )
    messages = [NormalizedMessage(role="user", content=prompt)]
    if system_prompt:
        messages.insert(0, NormalizedMessage(role="system", content=system_prompt))

    shown = ""

    def _render(text: str) -> None:
        # The sink gets the whole text so far; print only what is new.
        nonlocal shown
        if text.startswith(shown):
            click.echo(text[len(shown) :], nl=False)
        else:
            click.echo("\n" + text, nl=False)
        shown = text

    try:
        reply = asyncio.run(
            send_message(messages, settings, _render if stream else None, config=config)
        )
    except ChatGateError as exc:
        if shown:
            click.echo()
        err_console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    if stream:
        click.echo()
    else:
        console.print(reply, markup=False, highlight=False)
