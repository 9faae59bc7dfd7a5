"""CLI commands for inspecting configuration."""

from __future__ import annotations

import typer
from rich.console import Console

config_app = typer.Typer(no_args_is_help=True)
console = Console()


@config_app.command("show")
def config_show() -> None:
    """Print resolved settings as JSON. Secrets are masked."""
    from batchpull.config.loader import get_settings

    settings = get_settings()
    console.print_json(data=settings.model_dump(mode="json"))
