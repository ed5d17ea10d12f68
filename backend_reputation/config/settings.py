"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Provide defaults for optional settings.
- Expose typed settings (storage root, data-source parameter name, log level)
  for the worker entrypoint and CLI tools. The scoring engine itself takes
  everything it needs as explicit arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backend_reputation.config.env import (
    get_db_key_param,
    get_log_level,
    get_storage_root,
)


@dataclass(frozen=True)
class Settings:
    """Worker settings resolved from the environment."""

    storage_root: Path
    db_key_param: str
    log_level: str


def get_settings() -> Settings:
    """
    Return the current application settings.

    Values are re-read from the environment on every call so tests can
    monkeypatch variables without cache resets.
    """
    return Settings(
        storage_root=get_storage_root(),
        db_key_param=get_db_key_param(),
        log_level=get_log_level(),
    )
