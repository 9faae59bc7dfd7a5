"""Batch runner: one session, many requests, one report."""

from __future__ import annotations

import datetime
from typing import Sequence

from batchpull.processing.consolidator import ConsolidatedDataset, consolidate, split_lines
from batchpull.processing.models import BatchReport, DayOutcome, FetchRequest, RequestReport
from batchpull.processing.report import build_request_report, describe_day
from batchpull.remote.base import (
    ConnectionDescriptor,
    ErrorKind,
    RemoteSession,
    SessionFactory,
)
from batchpull.remote.fetcher import FetchOutcome, RemoteFileFetcher
from batchpull.remote.negotiator import ConnectionNegotiator, negotiated_session
from batchpull.remote.sftp import SftpSession
from batchpull.utils.logging import get_logger

logger = get_logger(__name__)


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def process_request(
    fetcher: RemoteFileFetcher,
    request: FetchRequest,
    keep_raw: bool = False,
) -> RequestReport:
    """Fetch and consolidate every day of one request, in day order.

    Missing files and transport faults become DayOutcomes; they never stop
    the remaining days from being processed.
    """
    log = [f"Processing {request.display_name} ({request.file_name}) for {request.date_range}"]
    dataset = ConsolidatedDataset()
    outcomes: list[DayOutcome] = []
    raw_files: dict[str, bytes] = {}

    for day_key in request.date_range.days():
        fetched = fetcher.fetch(request.owner_id, day_key, request.file_name)
        outcome = _day_outcome(fetched)
        if outcome.success and fetched.content is not None:
            dataset = consolidate(day_key, request.owner_label, fetched.content, dataset)
            if keep_raw:
                raw_files[day_key] = fetched.content
        outcomes.append(outcome)
        log.append(describe_day(request, outcome))

    report = build_request_report(request, dataset, outcomes, log, raw_files)
    logger.info(
        "request_complete",
        owner=request.owner_id,
        file=request.file_name,
        rows=report.rows_added,
        days=f"{report.successful_days}/{report.total_days}",
    )
    return report


def _day_outcome(fetched: FetchOutcome) -> DayOutcome:
    if not fetched.success or fetched.content is None:
        return DayOutcome.from_fetch(fetched)

    lines = split_lines(fetched.content)
    if not lines:
        return DayOutcome(
            day_key=fetched.day_key,
            attempted_path=fetched.remote_path,
            success=False,
            byte_size=fetched.downloaded_size,
            listed_size=fetched.listed_size,
            size_mismatch=fetched.size_mismatch,
            error_kind=ErrorKind.EMPTY,
            detail="File has no content",
        )

    # Every line after the day's own header is a data row
    return DayOutcome.from_fetch(fetched, rows_added=len(lines) - 1)


def run_batch(
    descriptor: ConnectionDescriptor,
    requests: Sequence[FetchRequest],
    *,
    session_factory: SessionFactory = SftpSession,
    keep_raw: bool = False,
    skip_empty_listing: bool = False,
) -> BatchReport:
    """Run every request against one negotiated session.

    Raises RemoteConnectionError when no profile connects. Any other
    outcome, including requests that found no data, comes back as a
    BatchReport. The session is closed exactly once on every exit path.
    """
    report = BatchReport(started_at=_now())
    report.log.append(f"Starting batch: {len(requests)} request(s) on {descriptor.host}")
    logger.info("batch_start", host=descriptor.host, requests=len(requests))

    negotiator = ConnectionNegotiator(descriptor, session_factory)
    with negotiated_session(negotiator) as session:
        report.profile = negotiator.profile.name if negotiator.profile else None
        report.log.append(f"Connected using profile '{report.profile}'")
        _run_requests(session, requests, report, keep_raw, skip_empty_listing)

    if negotiator.close_error is not None:
        report.log.append(f"Session close failed: {negotiator.close_error}")
    else:
        report.log.append("Session closed")
    report.finished_at = _now()
    logger.info(
        "batch_complete",
        succeeded=sum(1 for r in report.reports if r.success),
        requests=len(report.reports),
        rows=report.total_rows,
    )
    return report


def _run_requests(
    session: RemoteSession,
    requests: Sequence[FetchRequest],
    report: BatchReport,
    keep_raw: bool,
    skip_empty_listing: bool,
) -> None:
    fetcher = RemoteFileFetcher(session, skip_empty_listing=skip_empty_listing)
    for request in requests:
        request_report = process_request(fetcher, request, keep_raw=keep_raw)
        report.reports.append(request_report)
        report.log.extend(request_report.log)
