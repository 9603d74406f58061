"""chatgate providers / models — browse the static catalog."""

from __future__ import annotations

import json
import sys

from rich.console import Console
from rich.table import Table

from chatgate.providers.registry import PROVIDER_PRESETS, list_models, list_providers

_AUTH_STYLE = {
    "none": "green",
    "bearer": "yellow",
    "api-key": "yellow",
    "query-param": "yellow",
}


def cmd_providers(as_json: bool, console: Console) -> None:
    """Print the provider presets."""
    presets = list_providers()

    if as_json:
        rows = [
            {
                "id": p.id,
                "display_name": p.display_name,
                "default_base_url": p.default_base_url,
                "dialect": p.dialect.value,
                "auth_type": p.auth_type.value,
            }
            for p in presets
        ]
        print(json.dumps(rows, indent=2))
        return

    table = Table(title="Providers", show_lines=False)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Dialect", style="dim")
    table.add_column("Auth")
    table.add_column("Default URL", style="dim")

    for p in presets:
        style = _AUTH_STYLE.get(p.auth_type.value, "")
        table.add_row(
            p.id,
            p.display_name,
            p.dialect.value,
            f"[{style}]{p.auth_type.value}[/{style}]",
            p.default_base_url,
        )

    console.print(table)


def cmd_models(provider_id: str | None, as_json: bool, console: Console) -> None:
    """Print catalogued models, optionally for one provider."""
    if provider_id is not None and provider_id not in PROVIDER_PRESETS:
        console.print(f"[red]Unknown provider:[/red] {provider_id}")
        console.print(f"Known providers: {', '.join(sorted(PROVIDER_PRESETS))}")
        sys.exit(1)

    rows = list_models(provider_id)

    if as_json:
        print(
            json.dumps(
                [
                    {
                        "id": m.id,
                        "provider_id": m.provider_id,
                        "display_name": m.display_name,
                        "default_base_url": m.default_base_url,
                    }
                    for m in rows
                ],
                indent=2,
            )
        )
        return

    if not rows:
        console.print("[dim]No catalogued models for this provider.[/dim]")
        console.print("\nRun [cyan]chatgate discover <base-url>[/cyan] to list served models.")
        return

    table = Table(title="Models", show_lines=False)
    table.add_column("Model", style="cyan")
    table.add_column("Provider")
    table.add_column("Name")
    table.add_column("Description", style="dim")

    for m in rows:
        table.add_row(m.id, m.provider_id, m.display_name, m.description)

    console.print(table)
