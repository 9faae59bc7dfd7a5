"""Tests for configuration loading."""

from __future__ import annotations

from batchpull.config.settings import AppSettings, StorageSettings
from batchpull.remote.base import DEFAULT_PROFILES


def test_default_settings():
    """AppSettings can be created with defaults."""
    settings = AppSettings()
    assert settings.log_level == "INFO"
    assert settings.reports.default_file == "OrderDetails.csv"
    assert "TimeEntries.csv" in settings.reports.catalogue
    assert [p.name for p in settings.sftp.profiles] == ["modern", "legacy"]
    assert settings.storage.output_root.name == "output"


def test_storage_paths():
    """StorageSettings computes derived paths correctly."""
    s = StorageSettings()
    assert s.artifacts_dir.name == "artifacts"
    assert s.raw_dir.name == "raw"
    assert s.summaries_dir.name == "summaries"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SFTP_HOST", "sftp.example.test")
    monkeypatch.setenv("SFTP_USERNAME", "export-user")
    monkeypatch.setenv("SFTP_PRIVATE_KEY", "key-material")
    monkeypatch.setenv("SFTP_TIMEOUT", "12.5")

    descriptor = AppSettings().to_descriptor()

    assert descriptor.host == "sftp.example.test"
    assert descriptor.username == "export-user"
    assert descriptor.private_key == "key-material"
    assert descriptor.timeout == 12.5
    assert descriptor.passphrase is None
    assert descriptor.profiles == DEFAULT_PROFILES


def test_private_key_is_masked(monkeypatch):
    monkeypatch.setenv("SFTP_PRIVATE_KEY", "key-material")

    dumped = AppSettings().model_dump(mode="json")

    assert dumped["sftp"]["private_key"] != "key-material"
    assert "key-material" not in repr(AppSettings().to_descriptor())
