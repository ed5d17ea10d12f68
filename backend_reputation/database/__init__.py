"""
Snapshot database layer: read-only access to a run's relational snapshot.

The snapshot is a self-contained SQLite file fetched from the object store,
opened read-only for one run and released afterwards.
"""

from backend_reputation.database.connection import open_snapshot_db
from backend_reputation.database.models import (
    CommentRecord,
    CommentVoteRecord,
    ProposalRecord,
    ReviewRecord,
    SnapshotData,
    UserRecord,
)
from backend_reputation.database.repositories import load_snapshot

__all__ = [
    "open_snapshot_db",
    "load_snapshot",
    "CommentRecord",
    "CommentVoteRecord",
    "ProposalRecord",
    "ReviewRecord",
    "SnapshotData",
    "UserRecord",
]
