"""Tests for request report building."""

from __future__ import annotations

import datetime

import pytest

from batchpull.processing.consolidator import ConsolidatedDataset, consolidate_all
from batchpull.processing.models import DayOutcome, FetchRequest
from batchpull.processing.report import (
    NO_DATA_SENTINEL,
    artifact_name,
    build_request_report,
    describe_day,
)
from batchpull.remote.base import ErrorKind, NoDataError


@pytest.fixture
def request_() -> FetchRequest:
    return FetchRequest(
        owner_id="56585",
        file_name="TimeEntries.csv",
        start=datetime.date(2025, 6, 23),
        end=datetime.date(2025, 6, 29),
        owner_label="Pier 32",
        description="Labor/Time Entries",
    )


def _ok(day: str, rows: int, size: int) -> DayOutcome:
    return DayOutcome(
        day_key=day,
        attempted_path=f"/56585/{day}/TimeEntries.csv",
        success=True,
        byte_size=size,
        listed_size=size,
        rows_added=rows,
    )


def _failed(day: str, kind: ErrorKind, detail: str = "") -> DayOutcome:
    return DayOutcome(
        day_key=day,
        attempted_path=f"/56585/{day}/TimeEntries.csv",
        success=False,
        error_kind=kind,
        detail=detail,
    )


def test_artifact_name(request_: FetchRequest):
    assert artifact_name(request_) == "Pier_32_Weekly_TimeEntries_2025-06-23_to_2025-06-29.csv"
    unlabelled = request_.model_copy(update={"owner_label": None})
    assert artifact_name(unlabelled) == "56585_Weekly_TimeEntries_2025-06-23_to_2025-06-29.csv"


def test_report_with_data(request_: FetchRequest):
    dataset = consolidate_all(
        [("20250623", "Emp,Hours\nann,8\nbob,6"), ("20250625", "Emp,Hours\ncid,4")],
        owner_label="Pier 32",
    )
    outcomes = [
        _ok("20250623", 2, 30),
        _failed("20250624", ErrorKind.NOT_FOUND),
        _ok("20250625", 1, 20),
    ]

    report = build_request_report(request_, dataset, outcomes, [])

    assert report.success
    assert report.rows_added == 3
    assert report.successful_days == 2
    assert report.total_days == 3
    assert report.failed_days == 1
    assert report.total_bytes == 50
    assert report.error is None
    assert report.artifact.splitlines()[0] == '"Date","Owner",Emp,Hours'
    assert len(report.artifact.splitlines()) == 4
    assert report.log[-1] == "✓ Pier 32 Labor/Time Entries: 3 records from 2 of 3 days"
    report.raise_for_status()


def test_no_data_uses_sentinel(request_: FetchRequest):
    outcomes = [_failed("20250623", ErrorKind.NOT_FOUND), _failed("20250624", ErrorKind.EMPTY)]

    report = build_request_report(request_, ConsolidatedDataset(), outcomes, [])

    assert not report.success
    assert report.artifact == NO_DATA_SENTINEL
    assert report.artifact != ""
    assert report.rows_added == 0
    assert "No data found" in report.error
    assert report.log[-1].startswith("✗ ")

    with pytest.raises(NoDataError) as exc_info:
        report.raise_for_status()
    assert exc_info.value.all_missing
    assert not exc_info.value.transient
    assert len(exc_info.value.outcomes) == 2


def test_header_only_days_still_sentinel(request_: FetchRequest):
    """A header with no rows is not data."""
    dataset = consolidate_all([("20250623", "Emp,Hours\n")])
    report = build_request_report(request_, dataset, [_ok("20250623", 0, 10)], [])

    assert not report.success
    assert report.artifact == NO_DATA_SENTINEL
    assert report.successful_days == 1


def test_no_data_from_transport_failures_is_transient(request_: FetchRequest):
    outcomes = [
        _failed("20250623", ErrorKind.TRANSPORT, "download failed: timed out"),
        _failed("20250624", ErrorKind.NOT_FOUND),
    ]

    report = build_request_report(request_, ConsolidatedDataset(), outcomes, [])

    assert "1 of 2 days failed to download" in report.error
    with pytest.raises(NoDataError) as exc_info:
        report.raise_for_status()
    assert exc_info.value.transient
    assert not exc_info.value.all_missing


def test_describe_day(request_: FetchRequest):
    assert describe_day(request_, _ok("20250623", 2, 30)) == "TimeEntries.csv 20250623: 2 rows (30 bytes)"
    assert describe_day(request_, _failed("20250624", ErrorKind.NOT_FOUND)) == (
        "TimeEntries.csv 20250624: not found"
    )
    assert describe_day(request_, _failed("20250625", ErrorKind.TRANSPORT, "list failed: x")) == (
        "TimeEntries.csv 20250625: error - list failed: x"
    )
    mismatch = _ok("20250626", 1, 30).model_copy(update={"listed_size": 99, "size_mismatch": True})
    assert describe_day(request_, mismatch).endswith("listed as 99 bytes")
