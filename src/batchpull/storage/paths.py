"""Centralized path resolution for all output directories."""

from __future__ import annotations

import datetime
from pathlib import Path

from batchpull.config.settings import StorageSettings


def artifact_path(settings: StorageSettings, artifact_name: str) -> Path:
    """Path for a consolidated artifact."""
    return settings.artifacts_dir / artifact_name


def raw_path(settings: StorageSettings, owner_id: str, day_key: str, file_name: str) -> Path:
    """Path for one day's untouched export, e.g. raw/56571/20250623_OrderDetails.csv."""
    return settings.raw_dir / owner_id / f"{day_key}_{file_name}"


def summary_path(settings: StorageSettings, started_at: datetime.datetime) -> Path:
    """Path for a batch's JSON summary, named by its start time."""
    return settings.summaries_dir / f"{started_at.strftime('%Y%m%dT%H%M%SZ')}_batch.json"
