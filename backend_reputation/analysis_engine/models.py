"""
Data models for analysis engine output.

- Per-record audit details (one per comment / proposal), immutable once built.
- Attributions linking a detail to the actor(s) it is credited to.
- ActorSummary and ScoringResult produced by the report builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

SKIP_INVALID_CREATED_AT = "invalid_created_at"
SKIP_OUTSIDE_WINDOW = "outside_engagement_window"
SKIP_NO_COMMUNITY_REVIEWS = "no_community_reviews"
SKIP_NOT_REWARD_OR_PENALTY = "not_reward_or_penalty_class"


class ScoreDetail(Protocol):
    """Shape shared by every per-record detail."""

    record_id: int
    created_at: str
    created_ts: datetime | None
    scored: bool
    skip_reason: str | None

    def to_dict(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class CommentScoreDetail:
    """Audit trail for one scored (or skipped) comment."""

    record_id: int
    parent_id: int
    is_reply: bool
    proposal_id: int
    user_id: int
    collection_id: str
    created_at: str
    created_ts: datetime | None
    updated_at: str
    upvotes: int
    downvotes: int
    base: float
    related_project: bool
    same_author_reply: bool
    k: int
    self_interaction_multiplier: float
    tw: float | None
    age_months: float | None
    bucket_index: int | None
    owner_upvoted: bool
    owner_bonus: float
    comment_score: float
    scored: bool
    skip_reason: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "comment_id": self.record_id,
            "parent_id": self.parent_id,
            "is_reply": self.is_reply,
            "proposal_id": self.proposal_id,
            "user_id": self.user_id,
            "collection_id": self.collection_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "base": self.base,
            "related_project": self.related_project,
            "same_author_reply": self.same_author_reply,
            "k": self.k,
            "self_interaction_multiplier": self.self_interaction_multiplier,
            "tw": self.tw,
            "age_months": self.age_months,
            "bucket_index": self.bucket_index,
            "owner_upvoted": self.owner_upvoted,
            "owner_bonus": self.owner_bonus,
            "comment_score": self.comment_score,
            "scored": self.scored,
            "skip_reason": self.skip_reason,
        }


@dataclass(frozen=True)
class ProposalScoreDetail:
    """Audit trail for one proposal; credited to every owner."""

    record_id: int
    round_id: int
    pool_id: int
    proposer_id: int
    team_member_ids: tuple[int, ...]
    credited_user_ids: tuple[int, ...]
    credited_collection_ids: tuple[str, ...]
    created_at: str
    created_ts: datetime | None
    is_awarded: bool
    is_completed: bool
    classification: str
    community_review_count: int
    community_proposal_score_avg: float | None
    community_proposal_score_norm: float | None
    tw: float | None
    age_months: float | None
    bucket_index: int | None
    proposal_reward: float
    proposal_penalty: float
    scored: bool
    skip_reason: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "proposal_id": self.record_id,
            "round_id": self.round_id,
            "pool_id": self.pool_id,
            "proposer_id": self.proposer_id,
            "team_member_ids": list(self.team_member_ids),
            "credited_user_ids": list(self.credited_user_ids),
            "credited_collection_ids": list(self.credited_collection_ids),
            "created_at": self.created_at,
            "is_awarded": self.is_awarded,
            "is_completed": self.is_completed,
            "classification": self.classification,
            "community_review_count": self.community_review_count,
            "community_proposal_score_avg": self.community_proposal_score_avg,
            "community_proposal_score_norm": self.community_proposal_score_norm,
            "tw": self.tw,
            "age_months": self.age_months,
            "bucket_index": self.bucket_index,
            "proposal_reward": self.proposal_reward,
            "proposal_penalty": self.proposal_penalty,
            "scored": self.scored,
            "skip_reason": self.skip_reason,
        }


@dataclass(frozen=True)
class Attribution:
    """A detail credited to one actor; entry is the JSON shown under that actor."""

    actor_id: int
    detail: ScoreDetail
    entry: dict[str, Any]


@dataclass
class RecordScores:
    """What a strategy hands back to the pipeline after scoring every record."""

    details: list[ScoreDetail]
    attributions: list[Attribution]
    stats: dict[str, int] = field(default_factory=dict)


@dataclass
class ActorSummary:
    actor_id: int
    display_id: str
    final_score: float
    record_count: int
    scored_count: int
    records: list[dict[str, Any]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "actor_id": self.actor_id,
            "display_id": self.display_id,
            "final_score": self.final_score,
            "record_count": self.record_count,
            "scored_count": self.scored_count,
        }
        out.update(self.extra)
        out["records"] = self.records
        return out


@dataclass
class ScoringResult:
    """Everything needed to render both run artifacts."""

    algorithm_key: str
    params: dict[str, Any]
    actors: list[ActorSummary]
    records: list[ScoreDetail]
    stats: dict[str, int]

    def table_rows(self) -> list[tuple[str, float]]:
        """(display_id, final_score) for actors with at least one scored record."""
        return [(a.display_id, a.final_score) for a in self.actors if a.scored_count > 0]
