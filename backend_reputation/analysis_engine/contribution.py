"""
Contribution score: one score per comment, credited to its author.

    base       = comment_base_score + upvotes * up_w - downvotes * down_w
    k          = [author related to proposal] + [same-author reply]
    discount   = self_interaction_penalty_factor ** k
    owner      = bonus multiplier if any upvoter owns the proposal, else 1
    score      = owner * tw * discount * base      (0 and unscored when tw <= 0)

An actor's contribution_score is the sum of their scored comment scores.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from backend_reputation.analysis_engine.models import (
    SKIP_INVALID_CREATED_AT,
    SKIP_OUTSIDE_WINDOW,
    Attribution,
    CommentScoreDetail,
    RecordScores,
)
from backend_reputation.analysis_engine.params import ContributionScoreParams
from backend_reputation.analysis_engine.relations import RelationIndex, build_relation_index
from backend_reputation.analysis_engine.scorer import ScoringStrategy, display_id_for
from backend_reputation.analysis_engine.signals import VoteStats, aggregate_votes_by_comment
from backend_reputation.analysis_engine.time_weight import compute_time_weight, parse_timestamp
from backend_reputation.database.models import CommentRecord, SnapshotData
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)

ALGORITHM_KEY = "contribution_score"


def calculate_base_score(votes: VoteStats, params: ContributionScoreParams) -> float:
    return (
        params.comment_base_score
        + votes.upvotes * params.comment_upvote_weight
        - votes.downvotes * params.comment_downvote_weight
    )


def detect_self_interaction(
    comment: CommentRecord,
    relations: RelationIndex,
    comment_authors: dict[int, int],
) -> tuple[bool, bool, int]:
    """
    Count the self-interaction conditions that apply to a comment.

    Returns (related_project, same_author_reply, k). A reply counts only when it
    has a positive parent id whose author is this comment's author.
    """
    related = relations.is_related(comment.user_id, comment.proposal_id)
    same_author_reply = (
        comment.is_reply
        and comment.parent_id > 0
        and comment_authors.get(comment.parent_id) == comment.user_id
    )
    k = int(related) + int(same_author_reply)
    return related, same_author_reply, k


def compute_owner_bonus(
    votes: VoteStats,
    proposal_id: int,
    relations: RelationIndex,
    multiplier: float,
) -> tuple[bool, float]:
    """(owner_upvoted, bonus); bonus is the multiplier once, never per owner."""
    owners = relations.owners_of(proposal_id)
    if owners and not votes.upvoter_ids.isdisjoint(owners):
        return True, multiplier
    return False, 1.0


def compute_comment_score(
    comment: CommentRecord,
    votes: VoteStats,
    relations: RelationIndex,
    comment_authors: dict[int, int],
    params: ContributionScoreParams,
    now: datetime,
    collection_id: str,
) -> CommentScoreDetail:
    base = calculate_base_score(votes, params)
    related, same_author_reply, k = detect_self_interaction(comment, relations, comment_authors)
    discount = params.self_interaction_penalty_factor**k
    weight = compute_time_weight(comment.created_at, now, params.time_weight)
    owner_upvoted, owner_bonus = compute_owner_bonus(
        votes, comment.proposal_id, relations, params.project_owner_upvote_bonus_multiplier
    )

    tw = weight.tw or 0.0
    scored = tw > 0
    score = owner_bonus * tw * discount * base if scored else 0.0

    if not weight.is_valid:
        skip_reason = SKIP_INVALID_CREATED_AT
    elif not scored:
        skip_reason = SKIP_OUTSIDE_WINDOW
    else:
        skip_reason = None

    return CommentScoreDetail(
        record_id=comment.comment_id,
        parent_id=comment.parent_id,
        is_reply=comment.is_reply,
        proposal_id=comment.proposal_id,
        user_id=comment.user_id,
        collection_id=collection_id,
        created_at=comment.created_at,
        created_ts=parse_timestamp(comment.created_at),
        updated_at=comment.updated_at,
        upvotes=votes.upvotes,
        downvotes=votes.downvotes,
        base=base,
        related_project=related,
        same_author_reply=same_author_reply,
        k=k,
        self_interaction_multiplier=discount,
        tw=weight.tw,
        age_months=weight.age_months,
        bucket_index=weight.bucket_index,
        owner_upvoted=owner_upvoted,
        owner_bonus=owner_bonus,
        comment_score=score,
        scored=scored,
        skip_reason=skip_reason,
    )


class ContributionStrategy(ScoringStrategy):
    """Scores comments and credits each to its author."""

    algorithm_key = ALGORITHM_KEY
    tables = ("users", "comments", "comment_votes", "proposals")

    def __init__(self, params: ContributionScoreParams) -> None:
        self.params = params

    def params_dict(self) -> dict[str, Any]:
        return self.params.to_dict()

    def score_records(self, data: SnapshotData, now: datetime, display_ids: dict[int, str]) -> RecordScores:
        relations = build_relation_index(data.proposals)
        votes = aggregate_votes_by_comment(data.comment_votes)
        comment_authors = {c.comment_id: c.user_id for c in data.comments}

        details: list[CommentScoreDetail] = []
        attributions: list[Attribution] = []
        for comment in data.comments:
            detail = compute_comment_score(
                comment,
                votes.stats_for(comment.comment_id),
                relations,
                comment_authors,
                self.params,
                now,
                display_id_for(comment.user_id, display_ids),
            )
            if detail.skip_reason == SKIP_INVALID_CREATED_AT:
                logger.warning("comment_created_at_invalid", comment_id=comment.comment_id)
            details.append(detail)
            attributions.append(Attribution(comment.user_id, detail, detail.to_dict()))

        return RecordScores(
            details=details,
            attributions=attributions,
            stats={
                "ignored_votes": votes.ignored_votes,
                "malformed_team_members": relations.malformed_team_members,
            },
        )

    def summarize_actor(self, attributions: list[Attribution]) -> tuple[float, dict[str, Any]]:
        total = sum(a.detail.comment_score for a in attributions if a.detail.scored)
        return float(total), {}
