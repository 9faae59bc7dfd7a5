"""Builds per-request reports and operator log lines from day outcomes."""

from __future__ import annotations

from pathlib import PurePosixPath

from batchpull.processing.consolidator import ConsolidatedDataset
from batchpull.processing.models import DayOutcome, FetchRequest, RequestReport
from batchpull.remote.base import ErrorKind

NO_DATA_SENTINEL = "No data found for the specified date range"


def artifact_name(request: FetchRequest) -> str:
    """e.g. 'Pier_32_Weekly_TimeEntries_2025-06-23_to_2025-06-29.csv'.

    Unlabelled requests are prefixed with the owner id instead, so two owners
    fetching the same file in one batch never share a name.
    """
    stem = PurePosixPath(request.file_name).stem
    name = f"Weekly_{stem}_{request.start.isoformat()}_to_{request.end.isoformat()}.csv"
    prefix = "_".join(request.owner_label.split()) if request.owner_label else request.owner_id
    return f"{prefix}_{name}"


def describe_day(request: FetchRequest, outcome: DayOutcome) -> str:
    """One human-readable log line for a day outcome."""
    where = f"{request.file_name} {outcome.day_key}"
    if outcome.success:
        line = f"{where}: {outcome.rows_added} rows ({outcome.byte_size} bytes)"
        if outcome.size_mismatch:
            line += f", listed as {outcome.listed_size} bytes"
        return line
    if outcome.error_kind == ErrorKind.NOT_FOUND:
        return f"{where}: not found"
    if outcome.error_kind == ErrorKind.EMPTY:
        return f"{where}: file is empty"
    return f"{where}: error - {outcome.detail}"


def build_request_report(
    request: FetchRequest,
    dataset: ConsolidatedDataset,
    outcomes: list[DayOutcome],
    log: list[str],
    raw_files: dict[str, bytes] | None = None,
) -> RequestReport:
    """Freeze the accumulated dataset and outcomes into a RequestReport.

    When no rows were added the artifact is NO_DATA_SENTINEL, never an
    empty file, and `error` explains why.
    """
    rows_added = len(dataset.rows)
    successful = sum(1 for o in outcomes if o.success)
    total_bytes = sum(o.byte_size for o in outcomes if o.success)

    if rows_added > 0:
        artifact = dataset.render()
        error = None
        log.append(
            f"✓ {request.display_name}: {rows_added} records from "
            f"{successful} of {len(outcomes)} days"
        )
    else:
        artifact = NO_DATA_SENTINEL
        transient = sum(1 for o in outcomes if o.error_kind == ErrorKind.TRANSPORT)
        if transient:
            error = (
                f"No data found for {request.display_name}: "
                f"{transient} of {len(outcomes)} days failed to download"
            )
        else:
            error = f"No data found for {request.display_name} ({request.date_range})"
        log.append(f"✗ {request.display_name}: No data found for date range")

    return RequestReport(
        request=request,
        artifact=artifact,
        artifact_name=artifact_name(request),
        header=dataset.header,
        rows_added=rows_added,
        successful_days=successful,
        total_days=len(outcomes),
        total_bytes=total_bytes,
        outcomes=outcomes,
        log=log,
        error=error,
        raw_files=raw_files or {},
    )
