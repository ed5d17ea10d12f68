"""
Tests for the report builder: record ordering, roster inference, CSV/JSON rendering.
"""

from __future__ import annotations

import json

from backend_reputation.analysis_engine.contribution import ContributionStrategy
from backend_reputation.analysis_engine.params import ContributionScoreParams
from backend_reputation.analysis_engine.report import (
    record_sort_key,
    render_details_json,
    render_table_csv,
)
from backend_reputation.analysis_engine.scorer import compute_scores
from backend_reputation.database.models import CommentRecord, ProposalRecord, SnapshotData, UserRecord

PARAMS = ContributionScoreParams.from_inputs({
    "comment_base_score": 10,
    "engagement_window_months": 12,
    "monthly_decay_rate_percent": 10,
})


def _comment(cid: int, user: int, created_at: str) -> CommentRecord:
    return CommentRecord(
        comment_id=cid, parent_id=0, is_reply=False, user_id=user, proposal_id=10, created_at=created_at,
    )


def _data() -> SnapshotData:
    return SnapshotData(
        users=[UserRecord(id=3, collection_id="carol"), UserRecord(id=8, collection_id="henry")],
        comments=[
            _comment(5, 1, "2025-05-20T00:00:00Z"),
            _comment(4, 1, "2025-05-20T00:00:00Z"),
            _comment(9, 1, "broken"),
            _comment(2, 1, "broken"),
            _comment(7, 3, "2025-05-10T00:00:00+00:00"),
            _comment(1, 3, "2025-05-25 00:00:00"),
        ],
        proposals=[
            ProposalRecord(
                id=10, round_id=1, pool_id=1, proposer_id=99, is_awarded=False, is_completed=False,
                created_at="2025-01-01T00:00:00Z",
            )
        ],
    )


def test_global_record_order(now):
    """Valid records by (time, id), then invalid ones by id."""
    result = compute_scores(ContributionStrategy(PARAMS), _data(), now)
    assert [d.record_id for d in result.records] == [7, 4, 5, 1, 2, 9]


def test_per_actor_order_and_roster(now):
    """Roster = users plus authors; actors sorted by id; empty users kept in details only."""
    result = compute_scores(ContributionStrategy(PARAMS), _data(), now)
    assert [a.actor_id for a in result.actors] == [1, 3, 8]
    actor_1 = result.actors[0]
    assert [r["comment_id"] for r in actor_1.records] == [4, 5, 2, 9]
    assert actor_1.display_id == "1"
    assert actor_1.scored_count == 2
    henry = result.actors[2]
    assert henry.record_count == 0 and henry.records == []
    # proposer 99 owns a proposal but never commented
    assert 99 not in {a.actor_id for a in result.actors}


def test_record_sort_key_puts_invalid_last(now):
    result = compute_scores(ContributionStrategy(PARAMS), _data(), now)
    keys = [record_sort_key(d) for d in result.records]
    assert keys == sorted(keys)
    assert keys[-1][0] == 1


def test_render_table_csv(now):
    result = compute_scores(ContributionStrategy(PARAMS), _data(), now)
    text = render_table_csv(result).decode("utf-8")
    assert text == "collection_id,contribution_score\n1,20.0\ncarol,20.0\n"


def test_render_details_json(now):
    result = compute_scores(ContributionStrategy(PARAMS), _data(), now)
    body = render_details_json(
        result,
        run_id="run-7",
        algorithm_version="v2",
        generated_at=now,
        data_source_key="snapshots/run-7/deepfunding.db",
    )
    doc = json.loads(body)
    assert list(doc) == [
        "run_id", "algorithm_key", "algorithm_version", "generated_at",
        "data_source_key", "params", "actors", "records", "stats",
    ]
    assert doc["generated_at"] == "2025-06-01T12:00:00+00:00"
    assert doc["params"]["comment_base_score"] == 10
    assert doc["params"]["decay_bucket_size_months"] == 1
    assert doc["stats"]["total_seen"] == 6
    assert doc["stats"]["invalid_created_at"] == 2
    assert [r["comment_id"] for r in doc["records"]] == [7, 4, 5, 1, 2, 9]
    henry = doc["actors"][2]
    assert henry["display_id"] == "henry"
    assert henry["final_score"] == 0
    assert list(henry)[-1] == "records"
