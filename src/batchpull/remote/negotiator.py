"""Ordered connection-profile fallback."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Generator

from batchpull.remote.base import (
    ConnectionDescriptor,
    ConnectionProfile,
    RemoteConnectionError,
    RemoteSession,
    SessionFactory,
)
from batchpull.remote.sftp import SftpSession
from batchpull.utils.logging import get_logger

logger = get_logger(__name__)


class NegotiationState(str, Enum):
    IDLE = "idle"
    TRYING = "trying"
    CONNECTED = "connected"
    EXHAUSTED = "exhausted"


class ConnectionNegotiator:
    """Tries each profile of a descriptor in order until one connects.

    Profiles are expected most-permissive first. Every failed attempt is
    closed before the next one starts, so no handle leaks across attempts.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        session_factory: SessionFactory = SftpSession,
    ) -> None:
        self._descriptor = descriptor
        self._factory = session_factory
        self.state = NegotiationState.IDLE
        self.current: int | None = None
        self.attempts: list[tuple[str, Exception | None]] = []
        self.profile: ConnectionProfile | None = None
        self.close_error: Exception | None = None

    def connect(self) -> RemoteSession:
        """Return the first session that opens. Raises RemoteConnectionError."""
        profiles = self._descriptor.profiles
        if not profiles:
            self.state = NegotiationState.EXHAUSTED
            raise RemoteConnectionError(
                f"No connection profiles configured for {self._descriptor.host}"
            )

        last_error: Exception | None = None

        for i, profile in enumerate(profiles):
            self.state = NegotiationState.TRYING
            self.current = i
            logger.info("profile_attempt", profile=profile.name, attempt=i + 1, of=len(profiles))

            session = self._factory(self._descriptor, profile)
            try:
                session.open()
            except Exception as e:
                last_error = e
                self.attempts.append((profile.name, e))
                logger.warning("profile_failed", profile=profile.name, error=str(e))
                _close_quietly(session)
                continue

            self.attempts.append((profile.name, None))
            self.state = NegotiationState.CONNECTED
            self.profile = profile
            logger.info("profile_connected", profile=profile.name)
            return session

        self.state = NegotiationState.EXHAUSTED
        raise RemoteConnectionError(
            f"Could not connect to {self._descriptor.host} after "
            f"{len(profiles)} profile(s): {last_error}"
        ) from last_error


@contextmanager
def negotiated_session(
    negotiator: ConnectionNegotiator,
) -> Generator[RemoteSession, None, None]:
    """Connect via the negotiator and release the session exactly once on exit.

    A failure while closing is logged and kept on ``negotiator.close_error``;
    it never replaces an error raised by the block, and never discards work
    the block already finished.
    """
    session = negotiator.connect()
    try:
        yield session
    finally:
        negotiator.close_error = _close_quietly(session)
        if negotiator.close_error is None:
            logger.info("session_closed")


def _close_quietly(session: RemoteSession) -> Exception | None:
    try:
        session.close()
    except Exception as e:
        logger.error("session_close_failed", error=str(e))
        return e
    return None
