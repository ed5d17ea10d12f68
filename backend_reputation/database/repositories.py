"""
Snapshot repositories: read users, comments, votes, proposals and reviews.

Every loader takes an open sqlite3 connection (see database.connection) and
returns frozen records ordered by primary key so that repeated runs over the
same file see rows in the same order.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from backend_reputation.database.models import (
    CommentRecord,
    CommentVoteRecord,
    ProposalRecord,
    ReviewRecord,
    SnapshotData,
    UserRecord,
)
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true")
    return value is True or value == 1


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def load_users(conn: sqlite3.Connection) -> list[UserRecord]:
    rows = conn.execute(
        "SELECT id, collection_id, user_name, total_proposals FROM users ORDER BY id"
    ).fetchall()
    return [
        UserRecord(
            id=int(r["id"]),
            collection_id=_text(r["collection_id"]),
            user_name=_text(r["user_name"]),
            total_proposals=_to_int(r["total_proposals"]),
        )
        for r in rows
    ]


def load_comments(conn: sqlite3.Connection) -> list[CommentRecord]:
    rows = conn.execute("""
        SELECT comment_id, parent_id, is_reply, user_id, proposal_id, created_at, updated_at
        FROM comments
        ORDER BY comment_id
    """).fetchall()
    return [
        CommentRecord(
            comment_id=int(r["comment_id"]),
            parent_id=_to_int(r["parent_id"]) or 0,
            is_reply=_to_bool(r["is_reply"]),
            user_id=int(r["user_id"]),
            proposal_id=int(r["proposal_id"]),
            created_at=_text(r["created_at"]),
            updated_at=_text(r["updated_at"]),
        )
        for r in rows
    ]


def load_comment_votes(conn: sqlite3.Connection) -> list[CommentVoteRecord]:
    """Load comment votes; comment_id is stored as TEXT and coerced to int when possible."""
    rows = conn.execute("""
        SELECT voter_id, comment_id, vote_type, created_at
        FROM comment_votes
        ORDER BY voter_id, comment_id
    """).fetchall()
    return [
        CommentVoteRecord(
            voter_id=int(r["voter_id"]),
            comment_id=_to_int(r["comment_id"]),
            vote_type=_text(r["vote_type"]),
            created_at=r["created_at"],
        )
        for r in rows
    ]


def load_proposals(conn: sqlite3.Connection) -> list[ProposalRecord]:
    rows = conn.execute("""
        SELECT id, round_id, pool_id, proposer_id, is_awarded, is_completed, created_at, team_members
        FROM proposals
        ORDER BY id
    """).fetchall()
    return [
        ProposalRecord(
            id=int(r["id"]),
            round_id=_to_int(r["round_id"]) or 0,
            pool_id=_to_int(r["pool_id"]) or 0,
            proposer_id=int(r["proposer_id"]),
            is_awarded=_to_bool(r["is_awarded"]),
            is_completed=_to_bool(r["is_completed"]),
            created_at=_text(r["created_at"]),
            team_members=_text(r["team_members"]),
        )
        for r in rows
    ]


def load_reviews(conn: sqlite3.Connection) -> list[ReviewRecord]:
    rows = conn.execute("""
        SELECT review_id, proposal_id, reviewer_id, review_type, overall_rating, created_at
        FROM reviews
        ORDER BY review_id
    """).fetchall()
    return [
        ReviewRecord(
            review_id=int(r["review_id"]),
            proposal_id=_to_int(r["proposal_id"]),
            reviewer_id=_to_int(r["reviewer_id"]),
            review_type=_text(r["review_type"]),
            overall_rating=_text(r["overall_rating"]),
            created_at=r["created_at"],
        )
        for r in rows
    ]


def load_snapshot(conn: sqlite3.Connection, *, tables: tuple[str, ...] | None = None) -> SnapshotData:
    """
    Load the requested snapshot tables into memory.

    tables limits which loaders run (e.g. engagement scoring does not need
    comments); None loads everything.
    """
    loaders = {
        "users": load_users,
        "comments": load_comments,
        "comment_votes": load_comment_votes,
        "proposals": load_proposals,
        "reviews": load_reviews,
    }
    wanted = tables if tables is not None else tuple(loaders)
    data = SnapshotData()
    for name in wanted:
        setattr(data, name, loaders[name](conn))
    logger.info("snapshot_loaded", tables=list(wanted), **data.counts())
    return data
