"""CLI commands for inspecting the remote store."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

remote_app = typer.Typer(no_args_is_help=True)
console = Console()


@remote_app.command("probe")
def remote_probe(
    owner: Annotated[str, typer.Option("--owner", "-o", help="Export id on the remote store")],
    start: Annotated[
        Optional[str], typer.Option("--start", help="Start date YYYY-MM-DD")
    ] = None,
    end: Annotated[
        Optional[str], typer.Option("--end", help="End date YYYY-MM-DD")
    ] = None,
) -> None:
    """Connect and list each day's export directory for an owner."""
    from batchpull.cli.fetch import _check_connection_settings, _resolve_range
    from batchpull.config.loader import get_settings
    from batchpull.remote.base import RemoteConnectionError
    from batchpull.remote.fetcher import TRANSPORT_ERRORS, remote_dir
    from batchpull.remote.negotiator import ConnectionNegotiator, negotiated_session

    settings = get_settings()
    _check_connection_settings(settings)
    date_range = _resolve_range(start, end)

    negotiator = ConnectionNegotiator(settings.to_descriptor())

    table = Table(title=f"/{owner}/ ({date_range})", show_header=True, header_style="bold")
    table.add_column("Directory")
    table.add_column("Files", justify="right")
    table.add_column("Entries")

    try:
        with negotiated_session(negotiator) as session:
            for day_key in date_range.days():
                path = remote_dir(owner, day_key)
                try:
                    entries = session.listdir(path)
                except FileNotFoundError:
                    table.add_row(path, "-", "[yellow]missing[/yellow]")
                    continue
                except TRANSPORT_ERRORS as e:
                    table.add_row(path, "-", f"[red]{e}[/red]")
                    continue

                names = ", ".join(
                    f"{entry.name} ({entry.size:,} B)" if entry.size is not None else entry.name
                    for entry in sorted(entries, key=lambda item: item.name)
                )
                table.add_row(path, str(len(entries)), names or "-")
    except RemoteConnectionError as e:
        console.print(f"[red]Connection failed:[/red] {e}")
        for name, error in negotiator.attempts:
            console.print(f"  {name}: {error}")
        raise typer.Exit(2)

    console.print(f"Connected with profile [bold]{negotiator.profile.name}[/bold]")
    console.print(table)
