"""
Initialize snapshot database tables.

Creates users, comments, comment_votes, proposals and reviews with the same
columns the portal sync writes. The engine only reads snapshots; this module is
used by tools/build_demo_snapshot and by tests to produce snapshot files.
Safe to run multiple times.
"""

from __future__ import annotations

import sqlite3
import tempfile
from pathlib import Path
from typing import Any


def _create_tables(cur: sqlite3.Cursor) -> None:
    # users
    cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            collection_id TEXT NOT NULL,
            user_name TEXT NOT NULL DEFAULT '',
            email TEXT NOT NULL DEFAULT '',
            total_proposals INTEGER NOT NULL DEFAULT 0,
            raw_json TEXT NOT NULL DEFAULT '{}'
        )
    """)

    # comments
    cur.execute("""
        CREATE TABLE IF NOT EXISTS comments (
            comment_id INTEGER PRIMARY KEY,
            parent_id INTEGER NOT NULL,
            is_reply INTEGER NOT NULL,
            user_id INTEGER NOT NULL,
            proposal_id INTEGER NOT NULL,
            content TEXT NOT NULL DEFAULT '',
            comment_votes TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT '',
            raw_json TEXT NOT NULL DEFAULT '{}'
        )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS idx_comments_proposal_id ON comments(proposal_id)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_comments_user_id ON comments(user_id)")

    # comment_votes (comment_id is TEXT in the portal export)
    cur.execute("""
        CREATE TABLE IF NOT EXISTS comment_votes (
            voter_id INTEGER NOT NULL,
            comment_id TEXT NOT NULL,
            vote_type TEXT NOT NULL,
            created_at TEXT,
            raw_json TEXT NOT NULL DEFAULT '{}',
            PRIMARY KEY (voter_id, comment_id)
        )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS idx_comment_votes_comment_id ON comment_votes(comment_id)")

    # proposals
    cur.execute("""
        CREATE TABLE IF NOT EXISTS proposals (
            id INTEGER PRIMARY KEY,
            round_id INTEGER NOT NULL,
            pool_id INTEGER NOT NULL,
            proposer_id INTEGER NOT NULL,
            title TEXT NOT NULL DEFAULT '',
            content TEXT NOT NULL DEFAULT '',
            link TEXT NOT NULL DEFAULT '',
            feature_image TEXT NOT NULL DEFAULT '',
            requested_amount TEXT NOT NULL DEFAULT '',
            awarded_amount TEXT NOT NULL DEFAULT '',
            is_awarded INTEGER NOT NULL,
            is_completed INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT,
            team_members TEXT NOT NULL DEFAULT '[]',
            raw_json TEXT NOT NULL DEFAULT '{}'
        )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS idx_proposals_round_id ON proposals(round_id)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_proposals_pool_id ON proposals(pool_id)")

    # reviews
    cur.execute("""
        CREATE TABLE IF NOT EXISTS reviews (
            review_id INTEGER PRIMARY KEY AUTOINCREMENT,
            proposal_id INTEGER,
            reviewer_id INTEGER,
            review_type TEXT NOT NULL,
            overall_rating TEXT NOT NULL,
            feasibility_rating TEXT NOT NULL DEFAULT '',
            viability_rating TEXT NOT NULL DEFAULT '',
            desirability_rating TEXT NOT NULL DEFAULT '',
            usefulness_rating TEXT NOT NULL DEFAULT '',
            created_at TEXT,
            raw_json TEXT NOT NULL DEFAULT '{}'
        )
    """)
    cur.execute("CREATE INDEX IF NOT EXISTS idx_reviews_proposal_id ON reviews(proposal_id)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_reviews_reviewer_id ON reviews(reviewer_id)")


def init_snapshot_tables(conn: sqlite3.Connection) -> None:
    """Create all snapshot tables on an open connection and commit."""
    cur = conn.cursor()
    _create_tables(cur)
    conn.commit()


SNAPSHOT_TABLES = ("users", "comments", "comment_votes", "proposals", "reviews")


def insert_rows(conn: sqlite3.Connection, table: str, rows: list[dict[str, Any]]) -> int:
    """Insert dict rows into a snapshot table; columns with defaults may be omitted."""
    if table not in SNAPSHOT_TABLES:
        raise ValueError(f"Unknown snapshot table: {table}")
    for row in rows:
        cols = list(row)
        placeholders = ", ".join("?" for _ in cols)
        conn.execute(
            f"INSERT INTO {table} ({', '.join(cols)}) VALUES ({placeholders})",
            [row[c] for c in cols],
        )
    conn.commit()
    return len(rows)


def build_snapshot_bytes(tables: dict[str, list[dict[str, Any]]]) -> bytes:
    """Write rows into a fresh snapshot file and return its bytes."""
    with tempfile.TemporaryDirectory(prefix="reputation-build-") as tmp:
        db_path = Path(tmp) / "snapshot.db"
        conn = sqlite3.connect(db_path)
        try:
            init_snapshot_tables(conn)
            for table, rows in tables.items():
                insert_rows(conn, table, rows)
        finally:
            conn.close()
        return db_path.read_bytes()
