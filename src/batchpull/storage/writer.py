"""Writes batch artifacts, raw day files and a JSON summary to disk."""

from __future__ import annotations

from pathlib import Path

from batchpull.config.settings import StorageSettings
from batchpull.processing.models import BatchReport
from batchpull.storage.paths import artifact_path, raw_path, summary_path
from batchpull.utils.logging import get_logger

logger = get_logger(__name__)


def write_batch(report: BatchReport, settings: StorageSettings) -> list[Path]:
    """Persist a BatchReport under settings.output_root.

    Requests without data get no artifact file (their sentinel stays in the
    summary). Existing files with the same name are overwritten.

    Returns list of written file paths, summary last.
    """
    written: list[Path] = []

    for request_report in report.reports:
        request = request_report.request

        if request_report.success:
            out_path = artifact_path(settings, request_report.artifact_name)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(request_report.artifact, encoding="utf-8")
            logger.info(
                "artifact_written",
                owner=request.owner_id,
                rows=request_report.rows_added,
                path=str(out_path),
            )
            written.append(out_path)
        else:
            logger.warning("artifact_skipped", owner=request.owner_id, file=request.file_name)

        for day_key, content in request_report.raw_files.items():
            day_path = raw_path(settings, request.owner_id, day_key, request.file_name)
            day_path.parent.mkdir(parents=True, exist_ok=True)
            day_path.write_bytes(content)
            written.append(day_path)

    out_summary = summary_path(settings, report.started_at)
    out_summary.parent.mkdir(parents=True, exist_ok=True)
    out_summary.write_text(
        report.model_dump_json(indent=2, exclude={"reports": {"__all__": {"artifact"}}}),
        encoding="utf-8",
    )
    logger.info("summary_written", path=str(out_summary))
    written.append(out_summary)

    return written
