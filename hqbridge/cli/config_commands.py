"""Config file commands."""

from __future__ import annotations

import typer
from rich.table import Table

from hqbridge.utils.helpers import mask_secret

from .core import app, console

config_app = typer.Typer(help="Manage hqbridge configuration")
app.add_typer(config_app, name="config")


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a default config.json."""
    from hqbridge.config.loader import get_config_path, save_config
    from hqbridge.config.schema import Config

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")
    console.print("\nNext steps:")
    console.print("  1. Set [cyan]gateway.token[/cyan] in the config (or export GW_TOKEN)")
    console.print("  2. Run: [cyan]hqbridge serve[/cyan]")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (token masked)."""
    from hqbridge.config.loader import get_config_path, load_config

    config = load_config()
    gw = config.gateway

    table = Table(title=f"Effective config ({get_config_path()})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_row("gateway.url", gw.url)
    table.add_row("gateway.token", mask_secret(gw.token) or "[red](unset)[/red]")
    table.add_row("gateway.sessionKey", gw.session_key)
    table.add_row("gateway.handshakeTimeoutMs", str(gw.handshake_timeout_ms))
    table.add_row("gateway.lingerMs", str(gw.linger_ms))
    table.add_row("gateway.client", f"{gw.client_id}/{gw.client_version} ({gw.platform}, {gw.mode})")
    table.add_row("dedup.windowMs", str(config.dedup.window_ms))
    table.add_row("webhook.listen", f"{config.webhook.host}:{config.webhook.port}{config.webhook.path}")
    table.add_row("webhook.ignoreSenders", ", ".join(config.webhook.ignore_senders) or "-")
    table.add_row("telemetry.backend", config.telemetry.backend)
    console.print(table)
