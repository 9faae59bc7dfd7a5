"""Root CLI application."""

from __future__ import annotations

import typer

from batchpull.cli.config import config_app
from batchpull.cli.fetch import fetch_app
from batchpull.cli.remote import remote_app

app = typer.Typer(
    name="batchpull",
    help="Collect daily SFTP exports over a date range and consolidate them.",
    no_args_is_help=True,
)

app.add_typer(fetch_app, name="fetch", help="Download and consolidate daily exports")
app.add_typer(remote_app, name="remote", help="Inspect the remote store")
app.add_typer(config_app, name="config", help="Show resolved configuration")


def main() -> None:
    from batchpull.config.loader import get_settings
    from batchpull.utils.logging import setup_logging

    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    app()
