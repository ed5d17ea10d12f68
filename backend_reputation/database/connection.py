"""
Snapshot connection management.

The run's relational snapshot arrives as raw bytes from the object store. It is
written to a private temporary directory, opened read-only for the duration of
the run and released (connection closed, directory removed) on exit.
"""

from __future__ import annotations

import shutil
import sqlite3
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)

SNAPSHOT_DB_FILENAME = "deepfunding.db"


def connect_read_only(db_path: Path) -> sqlite3.Connection:
    """Open an existing SQLite file read-only with sqlite3.Row rows."""
    conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def open_snapshot_db(db_bytes: bytes, run_id: str = "") -> Iterator[sqlite3.Connection]:
    """
    Materialize snapshot bytes to a temp file and yield a read-only connection.

    The temp directory is removed even when the body raises.
    """
    prefix = f"reputation-snapshot-{run_id}-" if run_id else "reputation-snapshot-"
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    db_path = temp_dir / SNAPSHOT_DB_FILENAME
    conn: sqlite3.Connection | None = None
    try:
        db_path.write_bytes(db_bytes)
        conn = connect_read_only(db_path)
        logger.debug("snapshot_db_opened", run_id=run_id, size_bytes=len(db_bytes))
        yield conn
    finally:
        if conn is not None:
            conn.close()
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug("snapshot_db_released", run_id=run_id)
