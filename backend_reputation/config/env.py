"""
Environment variable loading for Backend Reputation.

- REPUTATION_STORAGE_ROOT: root directory of the local object store (default: ./storage)
- REPUTATION_DB_KEY_PARAM: run parameter that names the snapshot DB key (default: deepfunding_db_key)
- LOG_LEVEL / LOG_FORMAT: read by reputation_logging at import time
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is backend_reputation/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_STORAGE_DIRNAME = "storage"
DEFAULT_DB_KEY_PARAM = "deepfunding_db_key"


def load_reputation_env() -> None:
    """Load .env from project root. Safe to call multiple times; a missing file is ignored."""
    from dotenv import load_dotenv

    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH)


def get_storage_root() -> Path:
    """
    Return REPUTATION_STORAGE_ROOT from env as a Path.
    Default: <project root>/storage.
    """
    load_reputation_env()
    raw = (os.getenv("REPUTATION_STORAGE_ROOT") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return _ROOT / DEFAULT_STORAGE_DIRNAME


def get_db_key_param() -> str:
    """Return the run parameter name carrying the snapshot DB storage key."""
    load_reputation_env()
    return (os.getenv("REPUTATION_DB_KEY_PARAM") or "").strip() or DEFAULT_DB_KEY_PARAM


def get_log_level() -> str:
    """Return LOG_LEVEL from env, upper-cased. Default: INFO."""
    load_reputation_env()
    return (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
