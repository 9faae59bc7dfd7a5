"""Rich rendering of batch reports for the terminal."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from batchpull.processing.models import BatchReport, RequestReport
from batchpull.remote.base import ErrorKind

KIND_STYLES = {
    ErrorKind.NOT_FOUND: "yellow",
    ErrorKind.EMPTY: "yellow",
    ErrorKind.TRANSPORT: "red",
}


def print_request(console: Console, report: RequestReport) -> None:
    """Print one request's day-by-day outcomes."""
    request = report.request
    style = "green" if report.success else "red"
    status = "OK" if report.success else "NO DATA"
    console.print(
        f"\n[bold]{request.display_name}[/bold] ({request.owner_id}, {request.date_range})"
        f" [{style}]{status}[/{style}]"
    )

    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Day")
    table.add_column("Status")
    table.add_column("Rows", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Detail")

    for outcome in report.outcomes:
        if outcome.success:
            state = "[green]ok[/green]"
            detail = (
                f"listed as {outcome.listed_size} bytes" if outcome.size_mismatch else ""
            )
        else:
            s = KIND_STYLES.get(outcome.error_kind, "white")
            kind = outcome.error_kind.value if outcome.error_kind else "failed"
            state = f"[{s}]{kind}[/{s}]"
            detail = outcome.detail or ""
        table.add_row(
            outcome.day_key,
            state,
            str(outcome.rows_added),
            f"{outcome.byte_size:,}",
            detail,
        )

    console.print(table)


def print_batch(console: Console, report: BatchReport) -> None:
    """Print every request followed by a summary table."""
    for request_report in report.reports:
        print_request(console, request_report)

    summary = Table(title="Batch Summary", show_header=True, header_style="bold")
    summary.add_column("Request")
    summary.add_column("Days", justify="right")
    summary.add_column("Records", justify="right")
    summary.add_column("Size", justify="right")
    summary.add_column("Artifact")

    for r in report.reports:
        summary.add_row(
            r.request.display_name,
            f"{r.successful_days}/{r.total_days}",
            f"{r.rows_added:,}",
            f"{round(r.total_bytes / 1024)} KB",
            r.artifact_name if r.success else "[red]no data[/red]",
        )

    console.print(summary)
    if report.profile:
        console.print(f"Connected with profile [bold]{report.profile}[/bold]")
