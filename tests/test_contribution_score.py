"""
Tests for contribution scoring: base value, self-interaction discount, owner bonus, decay.

Snapshots are built in memory; "now" is fixed so every comment created at now has tw = 1.
"""

from __future__ import annotations

import pytest

from backend_reputation.analysis_engine.contribution import (
    ContributionStrategy,
    compute_owner_bonus,
    detect_self_interaction,
)
from backend_reputation.analysis_engine.params import ContributionScoreParams
from backend_reputation.analysis_engine.relations import build_relation_index
from backend_reputation.analysis_engine.scorer import compute_scores
from backend_reputation.analysis_engine.signals import VoteStats
from backend_reputation.database.models import (
    CommentRecord,
    CommentVoteRecord,
    ProposalRecord,
    SnapshotData,
    UserRecord,
)

NOW_ISO = "2025-06-01T12:00:00Z"


def _params(**overrides) -> ContributionScoreParams:
    values = {
        "comment_base_score": 10,
        "comment_upvote_weight": 2,
        "comment_downvote_weight": 3,
        "self_interaction_penalty_factor": 0.5,
        "project_owner_upvote_bonus_multiplier": 1.2,
        "engagement_window_months": 12,
        "monthly_decay_rate_percent": 10,
        "decay_bucket_size_months": 1,
    }
    values.update(overrides)
    return ContributionScoreParams.from_inputs(values)


def _proposal(pid: int, proposer: int, team: str = "[]") -> ProposalRecord:
    return ProposalRecord(
        id=pid, round_id=1, pool_id=1, proposer_id=proposer,
        is_awarded=False, is_completed=False, created_at=NOW_ISO, team_members=team,
    )


def _comment(cid: int, user: int, proposal: int, *, parent: int = 0, reply: bool = False,
             created_at: str = NOW_ISO) -> CommentRecord:
    return CommentRecord(
        comment_id=cid, parent_id=parent, is_reply=reply, user_id=user,
        proposal_id=proposal, created_at=created_at,
    )


def _votes(comment_id: int, up: list[int] = (), down: list[int] = ()) -> list[CommentVoteRecord]:
    return [CommentVoteRecord(voter_id=v, comment_id=comment_id, vote_type="upvote") for v in up] + [
        CommentVoteRecord(voter_id=v, comment_id=comment_id, vote_type="downvote") for v in down
    ]


def _score(data: SnapshotData, now, **overrides):
    return compute_scores(ContributionStrategy(_params(**overrides)), data, now)


def _detail(result, comment_id: int):
    return next(d for d in result.records if d.record_id == comment_id)


def test_scenario_a_plain_comment(now):
    """Unrelated author, no votes, tw = 1: score is the base score."""
    data = SnapshotData(
        users=[UserRecord(id=5, collection_id="c5")],
        comments=[_comment(1, user=5, proposal=10)],
        proposals=[_proposal(10, proposer=1)],
    )
    result = _score(data, now)
    d = _detail(result, 1)
    assert d.base == 10
    assert d.tw == 1.0
    assert d.k == 0
    assert d.comment_score == pytest.approx(10)
    assert d.scored and d.skip_reason is None
    assert result.table_rows() == [("c5", pytest.approx(10))]


def test_scenario_b_votes(now):
    """4 upvotes and 2 downvotes move the base to 10 + 8 - 6 = 12."""
    data = SnapshotData(
        comments=[_comment(1, user=5, proposal=10)],
        comment_votes=_votes(1, up=[20, 21, 22, 23], down=[24, 25]),
        proposals=[_proposal(10, proposer=1)],
    )
    d = _detail(_score(data, now), 1)
    assert (d.upvotes, d.downvotes) == (4, 2)
    assert d.base == 12
    assert d.comment_score == pytest.approx(12)


def test_scenario_c_double_penalty_compounds(now):
    """Proposer replying to themselves: k = 2, multiplier = 0.5 ** 2."""
    data = SnapshotData(
        comments=[
            _comment(1, user=1, proposal=10),
            _comment(2, user=1, proposal=10, parent=1, reply=True),
        ],
        proposals=[_proposal(10, proposer=1)],
    )
    d = _detail(_score(data, now), 2)
    assert d.related_project and d.same_author_reply
    assert d.k == 2
    assert d.self_interaction_multiplier == pytest.approx(0.25)
    assert d.comment_score == pytest.approx(2.5)


def test_scenario_d_owner_bonus(now):
    """One upvote from a team member: 1.2 * (10 + 2) = 14.4."""
    data = SnapshotData(
        comments=[_comment(1, user=5, proposal=10)],
        comment_votes=_votes(1, up=[2]),
        proposals=[_proposal(10, proposer=1, team="[2]")],
    )
    d = _detail(_score(data, now), 1)
    assert d.owner_upvoted
    assert d.owner_bonus == pytest.approx(1.2)
    assert d.k == 0
    assert d.comment_score == pytest.approx(14.4)


def test_owner_bonus_applied_once_for_many_owner_upvotes():
    relations = build_relation_index([_proposal(10, proposer=1, team="[2, 3]")])
    votes = VoteStats(upvotes=3, upvoter_ids={1, 2, 3})
    assert compute_owner_bonus(votes, 10, relations, 1.5) == (True, 1.5)
    assert compute_owner_bonus(VoteStats(upvotes=1, upvoter_ids={9}), 10, relations, 1.5) == (False, 1.0)


def test_reply_to_other_author_or_without_parent_is_not_self_interaction():
    relations = build_relation_index([_proposal(10, proposer=1)])
    authors = {1: 7, 2: 5}
    assert detect_self_interaction(_comment(2, 5, 10, parent=1, reply=True), relations, authors) == (False, False, 0)
    # is_reply with parent 0 never counts
    assert detect_self_interaction(_comment(3, 5, 10, parent=0, reply=True), relations, {0: 5}) == (False, False, 0)
    # parent matches but the comment is not flagged as a reply
    assert detect_self_interaction(_comment(4, 5, 10, parent=2, reply=False), relations, authors) == (False, False, 0)


def test_out_of_window_comment_is_skipped(now, days_ago):
    data = SnapshotData(
        users=[UserRecord(id=5, collection_id="c5")],
        comments=[_comment(1, user=5, proposal=10, created_at=days_ago(400))],
        proposals=[_proposal(10, proposer=1)],
    )
    result = _score(data, now)
    d = _detail(result, 1)
    assert d.tw == 0.0
    assert not d.scored
    assert d.comment_score == 0
    assert d.skip_reason == "outside_engagement_window"
    assert result.stats["outside_engagement_window"] == 1
    assert result.table_rows() == []
    actor = next(a for a in result.actors if a.actor_id == 5)
    assert actor.final_score == 0
    assert actor.record_count == 1 and actor.scored_count == 0


def test_invalid_timestamp_is_skipped_and_counted(now):
    data = SnapshotData(
        comments=[_comment(1, user=5, proposal=10, created_at="garbage"), _comment(2, user=5, proposal=10)],
        proposals=[_proposal(10, proposer=1)],
    )
    result = _score(data, now)
    d = _detail(result, 1)
    assert d.tw is None and d.age_months is None and d.bucket_index is None
    assert d.skip_reason == "invalid_created_at"
    assert result.stats["invalid_created_at"] == 1
    assert result.stats["total_seen"] == 2
    assert result.stats["total_scored"] == 1
    # invalid timestamps go last in the global record list
    assert [r.record_id for r in result.records] == [2, 1]


def test_decayed_score_uses_bucket_weight(now, days_ago):
    """Two full months old with 10%/month decay keeps 80% of the score."""
    data = SnapshotData(
        comments=[_comment(1, user=5, proposal=10, created_at=days_ago(70))],
        proposals=[_proposal(10, proposer=1)],
    )
    d = _detail(_score(data, now), 1)
    assert d.bucket_index == 2
    assert d.tw == pytest.approx(0.8)
    assert d.comment_score == pytest.approx(8.0)


def test_actor_score_sums_scored_comments_and_stats(now):
    data = SnapshotData(
        users=[UserRecord(id=5, collection_id="c5"), UserRecord(id=6, collection_id="")],
        comments=[_comment(1, user=5, proposal=10), _comment(2, user=5, proposal=10)],
        comment_votes=_votes(1, up=[6]) + [CommentVoteRecord(voter_id=7, comment_id=1, vote_type="like")],
        proposals=[_proposal(10, proposer=1, team="bad")],
    )
    result = _score(data, now)
    actor = next(a for a in result.actors if a.actor_id == 5)
    assert actor.final_score == pytest.approx(12 + 10)
    assert actor.record_count == 2
    assert [r["comment_id"] for r in actor.records] == [1, 2]
    assert result.stats["ignored_votes"] == 1
    assert result.stats["malformed_team_members"] == 1
    # user 6 is on the roster with no comments and falls back to its numeric id
    empty = next(a for a in result.actors if a.actor_id == 6)
    assert empty.display_id == "6"
    assert empty.record_count == 0 and empty.final_score == 0


def test_comment_with_short_fraction_timestamp_is_scored(now):
    """A valid ISO-8601 time with a two-digit fraction is weighted, not rejected."""
    data = SnapshotData(
        comments=[_comment(1, user=5, proposal=10, created_at="2025-06-01T11:00:00.12Z")],
        proposals=[_proposal(10, proposer=1)],
    )
    d = _detail(_score(data, now), 1)
    assert d.skip_reason is None
    assert d.tw == 1.0
    assert d.comment_score == pytest.approx(10.0)
