"""CLI commands for downloading and consolidating exports."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from typing_extensions import Annotated

if TYPE_CHECKING:
    from batchpull.config.settings import AppSettings
    from batchpull.processing.models import FetchRequest
    from batchpull.utils.dates import DateRange

fetch_app = typer.Typer(no_args_is_help=True)
console = Console()


def _resolve_range(start: str | None, end: str | None) -> DateRange:
    """Resolve a date range from CLI args, defaulting to the previous Mon-Sun week."""
    from batchpull.utils.dates import DateRange, previous_week

    if start is None and end is None:
        return previous_week()
    if start is None:
        typer.echo("Error: --end requires --start", err=True)
        raise typer.Exit(1)

    start_date = datetime.date.fromisoformat(start)
    end_date = datetime.date.fromisoformat(end) if end else datetime.date.today()
    return DateRange(start_date, end_date)


def _check_connection_settings(settings: AppSettings) -> None:
    missing = []
    if not settings.sftp.host:
        missing.append("SFTP_HOST")
    if not settings.sftp.username:
        missing.append("SFTP_USERNAME")
    if not settings.sftp.private_key.get_secret_value():
        missing.append("SFTP_PRIVATE_KEY")
    if missing:
        typer.echo(f"Error: not configured: {', '.join(missing)}", err=True)
        raise typer.Exit(1)


def _execute(
    settings: AppSettings,
    requests: list[FetchRequest],
    keep_raw: bool,
    dry_run: bool,
) -> None:
    from batchpull.cli.render import print_batch
    from batchpull.engine import run_batch
    from batchpull.remote.base import RemoteConnectionError
    from batchpull.storage.writer import write_batch

    _check_connection_settings(settings)

    try:
        report = run_batch(
            settings.to_descriptor(),
            requests,
            keep_raw=keep_raw,
            skip_empty_listing=settings.reports.skip_empty_listing,
        )
    except RemoteConnectionError as e:
        console.print(f"[red]Connection failed:[/red] {e}")
        raise typer.Exit(2)

    print_batch(console, report)

    if not dry_run:
        for path in write_batch(report, settings.storage):
            typer.echo(f"  -> {path}")

    if not report.success:
        typer.echo("No request produced data.", err=True)
        raise typer.Exit(1)

    typer.echo("Done.")


@fetch_app.command("run")
def fetch_run(
    owner: Annotated[str, typer.Option("--owner", "-o", help="Export id on the remote store")],
    label: Annotated[
        Optional[str], typer.Option("--label", "-l", help="Adds an Owner column with this value")
    ] = None,
    file: Annotated[
        Optional[str], typer.Option("--file", "-f", help="Export file name, e.g. OrderDetails.csv")
    ] = None,
    start: Annotated[
        Optional[str], typer.Option("--start", help="Start date YYYY-MM-DD")
    ] = None,
    end: Annotated[
        Optional[str], typer.Option("--end", help="End date YYYY-MM-DD")
    ] = None,
    keep_raw: Annotated[
        bool, typer.Option("--keep-raw", help="Also save each day's file untouched")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print the report without writing files")
    ] = False,
) -> None:
    """Consolidate one export file for one owner over a date range."""
    from batchpull.config.loader import get_settings
    from batchpull.processing.models import FetchRequest

    settings = get_settings()
    date_range = _resolve_range(start, end)
    file_name = file or settings.reports.default_file

    request = FetchRequest(
        owner_id=owner,
        owner_label=label,
        file_name=file_name,
        start=date_range.start,
        end=date_range.end,
        description=settings.reports.catalogue.get(file_name),
    )

    typer.echo(f"Fetching {file_name} for {owner} ({date_range})")
    _execute(settings, [request], keep_raw, dry_run)


@fetch_app.command("weekly")
def fetch_weekly(
    files: Annotated[
        Optional[str], typer.Option("--files", help="Comma-separated file names (default: catalogue)")
    ] = None,
    start: Annotated[
        Optional[str], typer.Option("--start", help="Start date YYYY-MM-DD")
    ] = None,
    end: Annotated[
        Optional[str], typer.Option("--end", help="End date YYYY-MM-DD")
    ] = None,
    keep_raw: Annotated[
        bool, typer.Option("--keep-raw", help="Also save each day's file untouched")
    ] = False,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print the report without writing files")
    ] = False,
) -> None:
    """Consolidate every configured owner x file in a single session."""
    from batchpull.config.loader import get_settings
    from batchpull.processing.models import FetchRequest

    settings = get_settings()
    owners = settings.reports.owners
    if not owners:
        typer.echo("Error: no owners configured (reports.owners in config.toml)", err=True)
        raise typer.Exit(1)

    catalogue = settings.reports.catalogue
    file_list = [f.strip() for f in files.split(",")] if files else list(catalogue)
    date_range = _resolve_range(start, end)

    requests = [
        FetchRequest(
            owner_id=o.owner_id,
            owner_label=o.label,
            file_name=f,
            start=date_range.start,
            end=date_range.end,
            description=catalogue.get(f),
        )
        for o in owners
        for f in file_list
    ]

    typer.echo(
        f"Fetching {len(file_list)} file(s) for {len(owners)} owner(s) ({date_range})"
    )
    _execute(settings, requests, keep_raw, dry_run)
