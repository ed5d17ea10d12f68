"""
Tests for proposal ownership: team_members parsing, owner sets, relation pairs.
"""

from __future__ import annotations

from backend_reputation.analysis_engine.relations import (
    build_relation_index,
    parse_team_members,
    resolve_proposal_owners,
)
from backend_reputation.database.models import ProposalRecord


def _proposal(pid: int, proposer: int, team: str = "[]") -> ProposalRecord:
    return ProposalRecord(
        id=pid,
        round_id=1,
        pool_id=1,
        proposer_id=proposer,
        is_awarded=False,
        is_completed=False,
        created_at="2025-01-01T00:00:00Z",
        team_members=team,
    )


def test_parse_team_members_variants():
    """Numeric entries and numeric strings are kept; junk entries are dropped."""
    assert parse_team_members("[1, 2, 3]") == ([1, 2, 3], True)
    assert parse_team_members('["4", 5.0, "x", null, true]') == ([4, 5], True)
    assert parse_team_members("") == ([], True)
    assert parse_team_members(None) == ([], True)


def test_parse_team_members_malformed():
    """A blob that is not a JSON array is reported as not ok."""
    assert parse_team_members("not json") == ([], False)
    assert parse_team_members('{"a": 1}') == ([], False)


def test_owners_include_proposer_and_team_sorted():
    owners, ok = resolve_proposal_owners(_proposal(10, 7, "[9, 3, 9]"))
    assert ok
    assert owners.owner_ids == (3, 7, 9)
    assert owners.team_member_ids == (3, 9)
    assert owners.role_of(7) == "proposer"
    assert owners.role_of(3) == "team_member"


def test_relation_index_pairs_and_malformed_count():
    """Proposer stays related even when the team blob is malformed."""
    index = build_relation_index([_proposal(10, 1, "[2]"), _proposal(11, 3, "oops")])
    assert index.is_related(1, 10)
    assert index.is_related(2, 10)
    assert not index.is_related(2, 11)
    assert index.is_related(3, 11)
    assert index.owners_of(10) == {1, 2}
    assert index.owners_of(99) == set()
    assert index.malformed_team_members == 1


def test_relation_index_keeps_owners_per_proposal():
    """proposal_owners carries the resolved owners and roles for every proposal."""
    index = build_relation_index([_proposal(10, 1, "[4, 2]"), _proposal(11, 3, "oops")])
    assert index.proposal_owners[10].owner_ids == (1, 2, 4)
    assert index.proposal_owners[10].role_of(4) == "team_member"
    assert index.proposal_owners[11].owner_ids == (3,)
    assert index.proposal_owners[11].team_member_ids == ()
