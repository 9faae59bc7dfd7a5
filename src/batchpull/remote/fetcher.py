"""Per-day remote file retrieval with failure isolation."""

from __future__ import annotations

from dataclasses import dataclass, field

import paramiko

from batchpull.remote.base import ErrorKind, RemoteSession
from batchpull.utils.logging import get_logger

logger = get_logger(__name__)

# Faults that mark one day as failed without touching the rest of the batch.
# socket.timeout is an OSError subclass; SFTPError is not an SSHException.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    EOFError,
    paramiko.SSHException,
    paramiko.SFTPError,
)


def remote_dir(owner_id: str, day_key: str) -> str:
    return f"/{owner_id}/{day_key}/"


def remote_path(owner_id: str, day_key: str, file_name: str) -> str:
    return f"/{owner_id}/{day_key}/{file_name}"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of attempting to fetch one file for one day."""

    day_key: str
    remote_path: str
    success: bool
    content: bytes | None = field(default=None, repr=False)
    listed_size: int | None = None
    error_kind: ErrorKind | None = None
    detail: str | None = None

    @property
    def downloaded_size(self) -> int:
        return len(self.content) if self.content is not None else 0

    @property
    def size_mismatch(self) -> bool:
        """Listing metadata disagrees with the bytes actually received."""
        return (
            self.success
            and self.listed_size is not None
            and self.listed_size != self.downloaded_size
        )


class RemoteFileFetcher:
    """Fetches `/{owner}/{day}/{file}` from an open session.

    fetch() never raises for a missing file or a transport fault; both are
    returned as unsuccessful FetchOutcomes and the session stays usable.
    """

    def __init__(self, session: RemoteSession, skip_empty_listing: bool = False) -> None:
        self._session = session
        self._skip_empty = skip_empty_listing

    def fetch(self, owner_id: str, day_key: str, file_name: str) -> FetchOutcome:
        path = remote_path(owner_id, day_key, file_name)

        try:
            entries = self._session.listdir(remote_dir(owner_id, day_key))
        except FileNotFoundError:
            logger.info("day_missing", path=path, reason="no_directory")
            return FetchOutcome(
                day_key=day_key,
                remote_path=path,
                success=False,
                error_kind=ErrorKind.NOT_FOUND,
                detail="Directory not found",
            )
        except TRANSPORT_ERRORS as e:
            return self._transport_failure(day_key, path, "list", e)

        entry = next((item for item in entries if item.name == file_name), None)
        if entry is None:
            logger.info("day_missing", path=path, reason="not_listed")
            return FetchOutcome(
                day_key=day_key,
                remote_path=path,
                success=False,
                error_kind=ErrorKind.NOT_FOUND,
                detail="File not found",
            )

        if self._skip_empty and entry.size == 0:
            logger.info("day_empty", path=path)
            return FetchOutcome(
                day_key=day_key,
                remote_path=path,
                success=False,
                listed_size=0,
                error_kind=ErrorKind.EMPTY,
                detail="File is empty",
            )

        try:
            content = self._session.read(path)
        except TRANSPORT_ERRORS as e:
            return self._transport_failure(day_key, path, "download", e, listed_size=entry.size)

        outcome = FetchOutcome(
            day_key=day_key,
            remote_path=path,
            success=True,
            content=content,
            listed_size=entry.size,
        )
        if outcome.size_mismatch:
            logger.warning(
                "size_mismatch",
                path=path,
                listed=entry.size,
                downloaded=outcome.downloaded_size,
            )
        logger.info("day_fetched", path=path, bytes=outcome.downloaded_size)
        return outcome

    @staticmethod
    def _transport_failure(
        day_key: str,
        path: str,
        stage: str,
        error: BaseException,
        listed_size: int | None = None,
    ) -> FetchOutcome:
        logger.warning("day_transport_error", path=path, stage=stage, error=str(error))
        return FetchOutcome(
            day_key=day_key,
            remote_path=path,
            success=False,
            listed_size=listed_size,
            error_kind=ErrorKind.TRANSPORT,
            detail=f"{stage} failed: {str(error) or type(error).__name__}",
        )
