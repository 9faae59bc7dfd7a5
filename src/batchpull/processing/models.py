"""Data models for batch requests, per-day outcomes and reports."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field

from batchpull.remote.base import ErrorKind, NoDataError
from batchpull.remote.fetcher import FetchOutcome
from batchpull.utils.dates import DateRange


class FetchRequest(BaseModel):
    """One file to collect for one owner over a date range."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    file_name: str
    start: datetime.date
    end: datetime.date
    owner_label: str | None = None
    description: str | None = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start, self.end)

    @property
    def display_name(self) -> str:
        name = self.description or self.file_name
        return f"{self.owner_label} {name}" if self.owner_label else name


class DayOutcome(BaseModel):
    """Recorded result of one day of one request. Never mutated."""

    model_config = ConfigDict(frozen=True)

    day_key: str
    attempted_path: str
    success: bool
    byte_size: int = 0
    listed_size: int | None = None
    size_mismatch: bool = False
    rows_added: int = 0
    error_kind: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def from_fetch(cls, outcome: FetchOutcome, rows_added: int = 0) -> DayOutcome:
        return cls(
            day_key=outcome.day_key,
            attempted_path=outcome.remote_path,
            success=outcome.success,
            byte_size=outcome.downloaded_size,
            listed_size=outcome.listed_size,
            size_mismatch=outcome.size_mismatch,
            rows_added=rows_added,
            error_kind=outcome.error_kind,
            detail=outcome.detail,
        )


class RequestReport(BaseModel):
    """Final artifact and bookkeeping for one FetchRequest."""

    request: FetchRequest
    artifact: str
    artifact_name: str
    header: str | None = None
    rows_added: int = 0
    successful_days: int = 0
    total_days: int = 0
    total_bytes: int = 0
    outcomes: list[DayOutcome] = Field(default_factory=list)
    log: list[str] = Field(default_factory=list)
    error: str | None = None
    raw_files: dict[str, bytes] = Field(default_factory=dict, exclude=True, repr=False)

    @property
    def success(self) -> bool:
        return self.rows_added > 0

    @property
    def failed_days(self) -> int:
        return self.total_days - self.successful_days

    def raise_for_status(self) -> None:
        """Raise NoDataError if this request produced no rows."""
        if not self.success:
            raise NoDataError(
                self.error or f"No data found for {self.request.display_name}",
                list(self.outcomes),
            )


class BatchReport(BaseModel):
    """Everything one invocation produced, in request order."""

    reports: list[RequestReport] = Field(default_factory=list)
    log: list[str] = Field(default_factory=list)
    profile: str | None = None
    started_at: datetime.datetime
    finished_at: datetime.datetime | None = None

    @property
    def success(self) -> bool:
        """True when at least one request produced data."""
        return any(r.success for r in self.reports)

    @property
    def total_rows(self) -> int:
        return sum(r.rows_added for r in self.reports)
