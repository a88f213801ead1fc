"""CLI commands for hqbridge."""

from __future__ import annotations

import asyncio

import typer

from hqbridge import __logo__

from . import config_commands  # noqa: F401  (registers `config` subcommands)
from .core import app, configure_logging, console


def _load_runtime(port: int | None = None, host: str | None = None):
    from hqbridge.app.bootstrap import build_relay_runtime
    from hqbridge.config.loader import load_config

    try:
        config = load_config()
        if port is not None:
            config.webhook.port = port
        if host is not None:
            config.webhook.host = host
        return build_relay_runtime(config)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Webhook port (default: from config)"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """Run the HQ webhook server in the foreground."""
    from hqbridge.api.server import run_server

    configure_logging(verbose)
    runtime = _load_runtime(port=port, host=host)
    console.print(
        f"{__logo__} Starting hqbridge on {runtime.config.webhook.host}:{runtime.config.webhook.port}..."
    )
    run_server(runtime, log_level="debug" if verbose else "info")


@app.command()
def send(
    text: str = typer.Argument(..., help="Message body"),
    sender: str = typer.Option("cli", "--sender", "-s", help="Sender shown in the session"),
    raw: bool = typer.Option(False, "--raw", help="Deliver TEXT verbatim, without the HQ prefix"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """Deliver one message to the gateway session and exit."""
    from hqbridge.core.models import InboundEvent
    from hqbridge.gateway.errors import GatewayError

    configure_logging(verbose)
    runtime = _load_runtime()

    async def _run() -> tuple[str, str | None]:
        try:
            if raw:
                await runtime.client.deliver(text)
                return "delivered", None
            outcome = await runtime.relay.handle(InboundEvent(sender=sender, body=text, channel="cli"))
            return outcome.status, outcome.error or outcome.skipped
        except GatewayError as e:
            return "failed", str(e)
        finally:
            await runtime.aclose()

    status, detail = asyncio.run(_run())
    if status == "failed":
        console.print(f"[red]Delivery failed:[/red] {detail}")
        raise typer.Exit(1)
    if status == "skipped":
        console.print(f"[yellow]Skipped ({detail})[/yellow]")
        return
    console.print(f"[green]✓[/green] Delivered to {runtime.config.gateway.session_key}")
