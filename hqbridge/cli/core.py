"""Typer application object, console and logging setup shared by all commands."""

from __future__ import annotations

import sys

import typer
from loguru import logger
from rich.console import Console

from hqbridge import __logo__, __version__

app = typer.Typer(
    name="hqbridge",
    help=f"{__logo__} hqbridge - relay HQ chat webhooks into a gateway session",
    no_args_is_help=True,
)

console = Console()

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | {message}"


def _print_version(value: bool) -> None:
    if not value:
        return
    console.print(f"{__logo__} hqbridge v{__version__}")
    raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=_print_version, is_eager=True),
) -> None:
    """Relay HQ chat webhooks into a gateway agent session."""


def configure_logging(verbose: bool) -> None:
    """Route loguru to stderr; ``--verbose`` adds gateway protocol chatter."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format=LOG_FORMAT)
