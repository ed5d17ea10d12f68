"""Storage key helpers for snapshot inputs and run artifacts."""

from __future__ import annotations

SNAPSHOT_PREFIX = "snapshots"
DEEPFUNDING_DB_FILENAME = "deepfunding.db"


def generate_snapshot_key(run_id: str, filename: str) -> str:
    """snapshots/<run_id>/<filename>"""
    return f"{SNAPSHOT_PREFIX}/{run_id}/{filename}"


def get_deepfunding_db_key(run_id: str) -> str:
    """Default storage key of the relational snapshot for a run."""
    return generate_snapshot_key(run_id, DEEPFUNDING_DB_FILENAME)
