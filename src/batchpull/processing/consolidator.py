"""Merges daily CSV exports into one provenance-annotated dataset.

Rows are treated as opaque text: nothing here validates column counts,
quoting or types. A day whose header differs from the first day's is still
appended as-is under the first header.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from batchpull.utils.dates import day_key_to_iso

DATE_COLUMN = "Date"
OWNER_COLUMN = "Owner"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def split_lines(raw: bytes | str) -> list[str]:
    """Decode and split export content, dropping whitespace-only lines."""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    # Exports from Windows hosts end lines with \r\n
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def provenance_prefix(day_key: str, owner_label: str | None) -> str:
    parts = [_quote(day_key_to_iso(day_key))]
    if owner_label is not None:
        parts.append(_quote(owner_label))
    return ",".join(parts)


def provenance_header(owner_label: str | None) -> str:
    parts = [_quote(DATE_COLUMN)]
    if owner_label is not None:
        parts.append(_quote(OWNER_COLUMN))
    return ",".join(parts)


@dataclass(frozen=True)
class ConsolidatedDataset:
    """Header plus rows accumulated across days, in day order."""

    header: str | None = None
    rows: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def render(self) -> str:
        """Header line followed by every row, newline-delimited."""
        if self.header is None:
            return "\n".join(self.rows)
        return "\n".join((self.header, *self.rows))


def consolidate(
    day_key: str,
    owner_label: str | None,
    raw_content: bytes | str,
    dataset: ConsolidatedDataset,
) -> ConsolidatedDataset:
    """Fold one day's export into the dataset and return the new dataset.

    The first line of every day is its header. Only the first day that has
    any content sets the dataset header; later headers are discarded.
    """
    lines = split_lines(raw_content)
    if not lines:
        return dataset

    header = dataset.header
    if header is None:
        header = f"{provenance_header(owner_label)},{lines[0]}"

    prefix = provenance_prefix(day_key, owner_label)
    new_rows = tuple(f"{prefix},{row}" for row in lines[1:])

    return replace(dataset, header=header, rows=dataset.rows + new_rows)


def consolidate_all(
    days: list[tuple[str, bytes | str]],
    owner_label: str | None = None,
) -> ConsolidatedDataset:
    """Consolidate (day_key, content) pairs in order from an empty dataset."""
    dataset = ConsolidatedDataset()
    for day_key, content in days:
        dataset = consolidate(day_key, owner_label, content, dataset)
    return dataset
