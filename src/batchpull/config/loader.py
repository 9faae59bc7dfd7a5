"""Settings entry point for the CLI commands."""

from __future__ import annotations

from functools import lru_cache

from batchpull.config.settings import AppSettings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Resolve settings once per process.

    A batch and the logging set up before it must see the same SFTP host,
    key and output root, even if the environment or config.toml changes
    mid-run. Tests that patch the environment call ``get_settings.cache_clear()``.
    """
    return AppSettings()
