"""Shared test fixtures."""

from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from batchpull.remote.base import ConnectionDescriptor, ConnectionProfile, RemoteEntry

PROFILE_A = ConnectionProfile(
    name="a",
    kex=("diffie-hellman-group16-sha512",),
    ciphers=("aes256-ctr",),
    host_key_types=("ssh-ed25519",),
    macs=("hmac-sha2-512",),
)
PROFILE_B = ConnectionProfile(
    name="b",
    kex=("diffie-hellman-group14-sha256",),
    ciphers=("aes128-ctr",),
    host_key_types=("ssh-rsa",),
    macs=("hmac-sha2-256",),
)

ORDER_HEADER = "Location,Order Id,Amount"


class FakeRemote:
    """In-memory remote store shared by every FakeSession a test creates."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.listed_sizes: dict[str, int] = {}
        self.list_errors: dict[str, BaseException] = {}
        self.read_errors: dict[str, BaseException] = {}
        self.refuse_profiles: set[str] = set()
        self.sessions: list[FakeSession] = []

    def add(self, path: str, content: bytes | str, listed_size: int | None = None) -> None:
        data = content.encode() if isinstance(content, str) else content
        self.files[path] = data
        if listed_size is not None:
            self.listed_sizes[path] = listed_size

    @property
    def opens(self) -> int:
        return sum(s.open_calls for s in self.sessions)

    @property
    def closes(self) -> int:
        return sum(s.close_calls for s in self.sessions)

    def factory(self, descriptor: ConnectionDescriptor, profile: ConnectionProfile) -> FakeSession:
        session = FakeSession(self, profile)
        self.sessions.append(session)
        return session


class FakeSession:
    def __init__(self, remote: FakeRemote, profile: ConnectionProfile) -> None:
        self.remote = remote
        self.profile = profile
        self.open_calls = 0
        self.close_calls = 0
        self.listed: list[str] = []

    def open(self) -> None:
        self.open_calls += 1
        if self.profile.name in self.remote.refuse_profiles:
            raise EOFError(f"kex failed for profile {self.profile.name}")

    def listdir(self, path: str) -> list[RemoteEntry]:
        self.listed.append(path)
        if path in self.remote.list_errors:
            raise self.remote.list_errors[path]

        entries = []
        for file_path, data in self.remote.files.items():
            directory, _, name = file_path.rpartition("/")
            if f"{directory}/" == path:
                size = self.remote.listed_sizes.get(file_path, len(data))
                entries.append(RemoteEntry(name=name, size=size))

        if not entries:
            raise FileNotFoundError(2, "No such file", path)
        return entries

    def read(self, path: str) -> bytes:
        if path in self.remote.read_errors:
            raise self.remote.read_errors[path]
        return self.remote.files[path]

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def descriptor() -> ConnectionDescriptor:
    return ConnectionDescriptor(
        host="sftp.example.test",
        username="export-user",
        private_key="not-a-real-key",
        profiles=(PROFILE_A, PROFILE_B),
        timeout=5.0,
    )


@pytest.fixture
def week() -> tuple[datetime.date, datetime.date]:
    """Monday 2025-06-23 .. Sunday 2025-06-29."""
    return datetime.date(2025, 6, 23), datetime.date(2025, 6, 29)


@pytest.fixture
def populated_remote(remote: FakeRemote) -> FakeRemote:
    """Owner 56571 has OrderDetails.csv for every day of the fixture week."""
    for day in range(23, 30):
        remote.add(
            f"/56571/202506{day}/OrderDetails.csv",
            f"{ORDER_HEADER}\nMain,{day}01,10.00\nMain,{day}02,12.50\n",
        )
    return remote


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "output"
    out.mkdir()
    return out
