"""
chatgate CLI entry point.

Commands:
  chatgate providers               — list provider presets
  chatgate models [--provider ID]  — list catalogued models
  chatgate discover BASE_URL       — list models served by a local endpoint
  chatgate status BASE_URL         — is a local inference service running?
  chatgate test --model M          — send a tiny request and report the result
  chatgate send PROMPT --model M   — send one prompt, streaming the reply
"""

from __future__ import annotations

import click
from rich.console import Console

from chatgate import __version__

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="chatgate %(version)s")
@click.option(
    "--log-level", default=None, help="Log level for structured logging (overrides config)."
)
@click.option("--log-json", is_flag=True, default=False, help="Emit JSON log lines.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_json: bool) -> None:
    """chatgate — one call contract for many LLM chat APIs."""
    from chatgate.core.config import load_config
    from chatgate.core.exceptions import ConfigError
    from chatgate.core.logging import configure_logging

    try:
        config = load_config()
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        raise SystemExit(1) from exc

    configure_logging(
        level=log_level or config.logging.level,
        json_output=log_json or config.logging.format == "json",
    )
    ctx.obj = config


# ---------------------------------------------------------------------------
# providers / models
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def providers(as_json: bool) -> None:
    """List provider presets."""
    from chatgate.cli._catalog import cmd_providers

    cmd_providers(as_json=as_json, console=console)


@cli.command()
@click.option("--provider", "provider_id", default=None, help="Only models of this provider")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def models(provider_id: str | None, as_json: bool) -> None:
    """List catalogued models."""
    from chatgate.cli._catalog import cmd_models

    cmd_models(provider_id=provider_id, as_json=as_json, console=console)


# ---------------------------------------------------------------------------
# discover / status
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("base_url")
@click.pass_obj
def discover(config, base_url: str) -> None:
    """List models served at BASE_URL (OpenAI or Ollama listing)."""
    from chatgate.cli._chat import cmd_discover

    cmd_discover(base_url=base_url, config=config, console=console)


@cli.command()
@click.argument("base_url")
@click.pass_obj
def status(config, base_url: str) -> None:
    """Check whether a local inference service at BASE_URL is running."""
    from chatgate.cli._chat import cmd_status

    cmd_status(base_url=base_url, config=config, console=console)


# ---------------------------------------------------------------------------
# test / send
# ---------------------------------------------------------------------------

_api_key_option = click.option(
    "--api-key",
    envvar="CHATGATE_API_KEY",
    default="",
    show_envvar=True,
    help="API key for the model's provider.",
)
_base_url_option = click.option(
    "--base-url", default="", help="Endpoint base URL (default: the model's preset)."
)


@cli.command("test")
@click.option("--model", "model_id", required=True, help="Model id, e.g. gpt-4o")
@_api_key_option
@_base_url_option
@click.pass_obj
def test_cmd(config, model_id: str, api_key: str, base_url: str) -> None:
    """Send a tiny request and report success or the provider's error."""
    from chatgate.cli._chat import cmd_test

    cmd_test(
        model_id=model_id,
        api_key=api_key,
        base_url=base_url,
        config=config,
        console=console,
    )


@cli.command()
@click.argument("prompt")
@click.option("--model", "model_id", required=True, help="Model id, e.g. claude-opus-4-5-20251101")
@_api_key_option
@_base_url_option
@click.option("--max-tokens", default=4096, show_default=True, type=click.IntRange(min=0))
@click.option("--temperature", default=None, type=click.FloatRange(0.0, 2.0))
@click.option("--system", "system_prompt", default="", help="Optional system message")
@click.option("--no-stream", is_flag=True, default=False, help="Wait for the whole reply")
@click.pass_obj
def send(
    config,
    prompt: str,
    model_id: str,
    api_key: str,
    base_url: str,
    max_tokens: int,
    temperature: float | None,
    system_prompt: str,
    no_stream: bool,
) -> None:
    """Send PROMPT to a model and print the reply."""
    from chatgate.cli._chat import cmd_send

    cmd_send(
        prompt=prompt,
        model_id=model_id,
        api_key=api_key,
        base_url=base_url,
        max_tokens=max_tokens,
        temperature=temperature,
        system_prompt=system_prompt,
        stream=not no_stream,
        config=config,
        console=console,
        err_console=err_console,
    )
