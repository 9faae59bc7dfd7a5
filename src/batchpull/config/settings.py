"""Typed configuration models using pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from batchpull.remote.base import DEFAULT_PROFILES, ConnectionDescriptor, ConnectionProfile

try:
    from pydantic_settings import TomlConfigSettingsSource

    _HAS_TOML = True
except ImportError:
    _HAS_TOML = False


class ProfileSettings(BaseModel):
    """One SSH algorithm profile as written in config.toml."""

    name: str
    kex: list[str]
    ciphers: list[str]
    host_key_types: list[str]
    macs: list[str]

    def to_profile(self) -> ConnectionProfile:
        return ConnectionProfile(
            name=self.name,
            kex=tuple(self.kex),
            ciphers=tuple(self.ciphers),
            host_key_types=tuple(self.host_key_types),
            macs=tuple(self.macs),
        )

    @classmethod
    def from_profile(cls, profile: ConnectionProfile) -> ProfileSettings:
        return cls(
            name=profile.name,
            kex=list(profile.kex),
            ciphers=list(profile.ciphers),
            host_key_types=list(profile.host_key_types),
            macs=list(profile.macs),
        )


class OwnerSettings(BaseModel):
    owner_id: str = Field(description="Export directory id on the remote store")
    label: str | None = Field(default=None, description="Value for the Owner column")


class SftpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SFTP_")

    host: str = Field(default="", description="SFTP server hostname")
    port: int = Field(default=22)
    username: str = Field(default="")
    private_key: SecretStr = Field(default=SecretStr(""), description="Private key text (PEM/OpenSSH)")
    passphrase: SecretStr | None = Field(default=None)
    timeout: float = Field(default=30.0, description="Seconds allowed for any single network call")
    profiles: list[ProfileSettings] = Field(
        default_factory=lambda: [ProfileSettings.from_profile(p) for p in DEFAULT_PROFILES],
        description="Connection profiles, tried in order",
    )


class ReportSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REPORTS_")

    default_file: str = Field(default="OrderDetails.csv")
    catalogue: dict[str, str] = Field(
        default={
            "OrderDetails.csv": "Order Summary",
            "CheckDetails.csv": "Transaction Details",
            "PaymentDetails.csv": "Payment Information",
            "ItemSelectionDetails.csv": "Detailed Item Sales",
            "TimeEntries.csv": "Labor/Time Entries",
        },
        description="Export file name -> description, used by `fetch weekly`",
    )
    owners: list[OwnerSettings] = Field(default_factory=list)
    skip_empty_listing: bool = Field(
        default=False,
        description="Treat files listed with size 0 as empty without downloading",
    )


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    output_root: Path = Field(default=Path("output"), description="Root directory for all output")

    @property
    def artifacts_dir(self) -> Path:
        return self.output_root / "artifacts"

    @property
    def raw_dir(self) -> Path:
        return self.output_root / "raw"

    @property
    def summaries_dir(self) -> Path:
        return self.output_root / "summaries"


class AppSettings(BaseSettings):
    """Top-level settings composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        toml_file="config.toml",
    )

    sftp: SftpSettings = Field(default_factory=SftpSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Emit one JSON object per log event")

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        sources = (
            kwargs["env_settings"],
            kwargs["dotenv_settings"],
        )
        if _HAS_TOML:
            sources += (TomlConfigSettingsSource(settings_cls),)
        sources += (kwargs["init_settings"],)
        return sources

    def to_descriptor(self) -> ConnectionDescriptor:
        """Build the engine's connection descriptor from resolved settings."""
        passphrase = self.sftp.passphrase.get_secret_value() if self.sftp.passphrase else None
        return ConnectionDescriptor(
            host=self.sftp.host,
            port=self.sftp.port,
            username=self.sftp.username,
            private_key=self.sftp.private_key.get_secret_value(),
            passphrase=passphrase,
            profiles=tuple(p.to_profile() for p in self.sftp.profiles),
            timeout=self.sftp.timeout,
        )
