"""
Write a small demo snapshot into the local object store.

The snapshot has a handful of users, proposals, comments, votes and community
reviews dated relative to --now, enough to exercise both algorithms:
self-replies, an owner upvote, a funded+concluded and an unfunded proposal,
one out-of-window comment and one unparsable timestamp.

Usage:
  py -m backend_reputation.tools.build_demo_snapshot --run-id demo
  py -m backend_reputation.tools.run_algorithm --run-id demo --algorithm contribution_score
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timedelta, timezone
from typing import Any

from backend_reputation.analysis_engine.time_weight import parse_timestamp
from backend_reputation.config import get_settings
from backend_reputation.database.init_tables import build_snapshot_bytes
from backend_reputation.reputation_logging import configure_structlog, get_logger
from backend_reputation.storage import LocalObjectStore, get_deepfunding_db_key

logger = get_logger(__name__)


def _ago(now: datetime, days: float) -> str:
    return (now - timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%SZ")


def demo_tables(now: datetime) -> dict[str, list[dict[str, Any]]]:
    """Demo rows keyed by table name."""
    return {
        "users": [
            {"id": 1, "collection_id": "alice-col", "user_name": "alice"},
            {"id": 2, "collection_id": "bob-col", "user_name": "bob"},
            {"id": 3, "collection_id": "carol-col", "user_name": "carol"},
            {"id": 4, "collection_id": "", "user_name": "dave"},
        ],
        "proposals": [
            {
                "id": 10, "round_id": 1, "pool_id": 1, "proposer_id": 1,
                "is_awarded": 1, "is_completed": 1, "created_at": _ago(now, 40),
                "team_members": json.dumps([2]),
            },
            {
                "id": 11, "round_id": 1, "pool_id": 2, "proposer_id": 3,
                "is_awarded": 0, "is_completed": 0, "created_at": _ago(now, 10),
                "team_members": "[]",
            },
            {
                "id": 12, "round_id": 2, "pool_id": 1, "proposer_id": 4,
                "is_awarded": 1, "is_completed": 0, "created_at": _ago(now, 5),
                "team_members": "not json",
            },
        ],
        "comments": [
            {"comment_id": 100, "parent_id": 0, "is_reply": 0, "user_id": 3, "proposal_id": 10, "created_at": _ago(now, 3)},
            {"comment_id": 101, "parent_id": 100, "is_reply": 1, "user_id": 3, "proposal_id": 10, "created_at": _ago(now, 2)},
            {"comment_id": 102, "parent_id": 0, "is_reply": 0, "user_id": 1, "proposal_id": 10, "created_at": _ago(now, 1)},
            {"comment_id": 103, "parent_id": 0, "is_reply": 0, "user_id": 4, "proposal_id": 11, "created_at": _ago(now, 400)},
            {"comment_id": 104, "parent_id": 0, "is_reply": 0, "user_id": 2, "proposal_id": 11, "created_at": "not a date"},
        ],
        "comment_votes": [
            {"voter_id": 1, "comment_id": "100", "vote_type": "upvote"},
            {"voter_id": 4, "comment_id": "100", "vote_type": "downvote"},
            {"voter_id": 2, "comment_id": "102", "vote_type": "upvote"},
            {"voter_id": 3, "comment_id": "102", "vote_type": "meh"},
        ],
        "reviews": [
            {"proposal_id": 10, "reviewer_id": 3, "review_type": "community", "overall_rating": "4.5"},
            {"proposal_id": 10, "reviewer_id": 4, "review_type": "community", "overall_rating": "3.5"},
            {"proposal_id": 11, "reviewer_id": 1, "review_type": "community", "overall_rating": "2"},
            {"proposal_id": 11, "reviewer_id": 2, "review_type": "expert", "overall_rating": "5"},
            {"proposal_id": 12, "reviewer_id": 1, "review_type": "community", "overall_rating": "n/a"},
        ],
    }


def write_demo_snapshot(store: LocalObjectStore, run_id: str, now: datetime) -> str:
    """Build the demo snapshot and store it under the run's default DB key."""
    body = build_snapshot_bytes(demo_tables(now))
    key = store.put(get_deepfunding_db_key(run_id), body, "application/x-sqlite3")
    logger.info("demo_snapshot_written", run_id=run_id, key=key, size_bytes=len(body))
    return key


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write a demo snapshot into the local object store.")
    parser.add_argument("--run-id", required=True)
    parser.add_argument("--now", default=None, help="ISO-8601 reference time (default: current UTC time)")
    args = parser.parse_args(argv)

    now = parse_timestamp(args.now) if args.now else datetime.now(timezone.utc)
    if now is None:
        parser.error(f"--now is not an ISO-8601 timestamp: {args.now!r}")

    settings = get_settings()
    configure_structlog(level=settings.log_level)
    store = LocalObjectStore(settings.storage_root)
    key = write_demo_snapshot(store, args.run_id, now)
    print(json.dumps({"storage_root": str(settings.storage_root), "key": key}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
