"""Remote session Protocol, connection types and the error hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from batchpull.processing.models import DayOutcome


@dataclass(frozen=True)
class ConnectionProfile:
    """One candidate set of SSH negotiation parameters."""

    name: str
    kex: tuple[str, ...]
    ciphers: tuple[str, ...]
    host_key_types: tuple[str, ...]
    macs: tuple[str, ...]


MODERN_PROFILE = ConnectionProfile(
    name="modern",
    kex=("diffie-hellman-group14-sha256", "diffie-hellman-group16-sha512"),
    ciphers=("aes128-ctr", "aes192-ctr", "aes256-ctr"),
    host_key_types=("ssh-rsa", "ssh-ed25519"),
    macs=("hmac-sha2-256", "hmac-sha2-512"),
)

LEGACY_PROFILE = ConnectionProfile(
    name="legacy",
    kex=("diffie-hellman-group14-sha256",),
    ciphers=("aes128-ctr",),
    host_key_types=("ssh-rsa",),
    macs=("hmac-sha2-256",),
)

DEFAULT_PROFILES = (MODERN_PROFILE, LEGACY_PROFILE)


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Everything needed to reach the remote store for one invocation."""

    host: str
    username: str
    private_key: str = field(repr=False)
    port: int = 22
    passphrase: str | None = field(default=None, repr=False)
    profiles: tuple[ConnectionProfile, ...] = DEFAULT_PROFILES
    timeout: float = 30.0  # seconds, applied to every network call


@dataclass(frozen=True)
class RemoteEntry:
    """A single directory listing entry."""

    name: str
    size: int | None = None  # None when the server omits attributes


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    EMPTY = "empty"


class BatchPullError(Exception):
    """Base exception for all batchpull failures."""


class RemoteConnectionError(BatchPullError, ConnectionError):
    """Every connection profile was tried and none produced a session."""


class NoDataError(BatchPullError):
    """A request produced no rows after all of its days were attempted.

    Carries the per-day outcomes so callers can tell "nothing existed"
    apart from "everything failed transiently".
    """

    def __init__(self, message: str, outcomes: list[DayOutcome]) -> None:
        super().__init__(message)
        self.outcomes = outcomes

    @property
    def transient(self) -> bool:
        """True when at least one day failed on the transport."""
        return any(o.error_kind == ErrorKind.TRANSPORT for o in self.outcomes)

    @property
    def all_missing(self) -> bool:
        return all(
            o.error_kind in (ErrorKind.NOT_FOUND, ErrorKind.EMPTY) for o in self.outcomes
        )


@runtime_checkable
class RemoteSession(Protocol):
    """Protocol every remote-store session must fulfill.

    A session is created unopened; open() establishes the connection and
    close() releases whatever open() acquired, including after a failed
    open(). close() must be safe to call more than once.
    """

    def open(self) -> None:
        """Establish the connection. Raises on any failure."""
        ...

    def listdir(self, path: str) -> list[RemoteEntry]:
        """List the entries of a remote directory."""
        ...

    def read(self, path: str) -> bytes:
        """Download the full content of a remote file."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


class SessionFactory(Protocol):
    def __call__(
        self, descriptor: ConnectionDescriptor, profile: ConnectionProfile
    ) -> RemoteSession: ...
