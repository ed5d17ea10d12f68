"""
Proposal engagement: reward funded+concluded proposals and penalize unfunded ones
by their community rating, then credit every owner of the proposal.

Classification:
    funded_concluded  awarded and completed   reward  = tw * norm
    unfunded          not awarded             penalty = tw * (1 - norm)
    other             awarded, not completed  never scored

Skip precedence: invalid_created_at > outside_engagement_window >
no_community_reviews > not_reward_or_penalty_class.

actor score = reward_weight * sum(rewards) - penalty_weight * sum(penalties)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from backend_reputation.analysis_engine.models import (
    SKIP_INVALID_CREATED_AT,
    SKIP_NO_COMMUNITY_REVIEWS,
    SKIP_NOT_REWARD_OR_PENALTY,
    SKIP_OUTSIDE_WINDOW,
    Attribution,
    ProposalScoreDetail,
    RecordScores,
)
from backend_reputation.analysis_engine.params import ProposalEngagementParams
from backend_reputation.analysis_engine.relations import ProposalOwners, build_relation_index
from backend_reputation.analysis_engine.scorer import ScoringStrategy, display_id_for
from backend_reputation.analysis_engine.signals import CommunityScore, aggregate_community_ratings
from backend_reputation.analysis_engine.time_weight import compute_time_weight, parse_timestamp
from backend_reputation.database.models import ProposalRecord, SnapshotData
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)

ALGORITHM_KEY = "proposal_engagement"

CLASS_FUNDED_CONCLUDED = "funded_concluded"
CLASS_UNFUNDED = "unfunded"
CLASS_OTHER = "other"


def classify_proposal(proposal: ProposalRecord) -> str:
    if proposal.is_awarded and proposal.is_completed:
        return CLASS_FUNDED_CONCLUDED
    if not proposal.is_awarded:
        return CLASS_UNFUNDED
    return CLASS_OTHER


def compute_proposal_score(
    proposal: ProposalRecord,
    owners: ProposalOwners,
    community: CommunityScore,
    params: ProposalEngagementParams,
    now: datetime,
    display_ids: dict[int, str],
) -> ProposalScoreDetail:
    classification = classify_proposal(proposal)
    weight = compute_time_weight(proposal.created_at, now, params.time_weight)

    if not weight.is_valid:
        skip_reason = SKIP_INVALID_CREATED_AT
    elif not weight.tw:
        skip_reason = SKIP_OUTSIDE_WINDOW
    elif community.norm is None:
        skip_reason = SKIP_NO_COMMUNITY_REVIEWS
    elif classification == CLASS_OTHER:
        skip_reason = SKIP_NOT_REWARD_OR_PENALTY
    else:
        skip_reason = None

    reward = 0.0
    penalty = 0.0
    if skip_reason is None:
        tw = weight.tw or 0.0
        norm = community.norm or 0.0
        if classification == CLASS_FUNDED_CONCLUDED:
            reward = tw * norm
        else:
            penalty = tw * (1.0 - norm)

    return ProposalScoreDetail(
        record_id=proposal.id,
        round_id=proposal.round_id,
        pool_id=proposal.pool_id,
        proposer_id=proposal.proposer_id,
        team_member_ids=owners.team_member_ids,
        credited_user_ids=owners.owner_ids,
        credited_collection_ids=tuple(display_id_for(i, display_ids) for i in owners.owner_ids),
        created_at=proposal.created_at,
        created_ts=parse_timestamp(proposal.created_at),
        is_awarded=proposal.is_awarded,
        is_completed=proposal.is_completed,
        classification=classification,
        community_review_count=community.count,
        community_proposal_score_avg=community.avg,
        community_proposal_score_norm=community.norm,
        tw=weight.tw,
        age_months=weight.age_months,
        bucket_index=weight.bucket_index,
        proposal_reward=reward,
        proposal_penalty=penalty,
        scored=reward != 0 or penalty != 0,
        skip_reason=skip_reason,
    )


class EngagementStrategy(ScoringStrategy):
    """Scores proposals and fans each one out to all of its owners."""

    algorithm_key = ALGORITHM_KEY
    tables = ("users", "proposals", "reviews")

    def __init__(self, params: ProposalEngagementParams) -> None:
        self.params = params

    def params_dict(self) -> dict[str, Any]:
        return self.params.to_dict()

    def score_records(self, data: SnapshotData, now: datetime, display_ids: dict[int, str]) -> RecordScores:
        relations = build_relation_index(data.proposals)
        ratings = aggregate_community_ratings(data.reviews)
        stats = {
            "total_user_attributions": 0,
            "proposals_with_no_community_reviews": 0,
            "not_reward_or_penalty_class": 0,
            "malformed_team_members": relations.malformed_team_members,
            "invalid_review_ratings": ratings.invalid_ratings,
        }

        details: list[ProposalScoreDetail] = []
        attributions: list[Attribution] = []
        for proposal in data.proposals:
            owners = relations.proposal_owners[proposal.id]
            detail = compute_proposal_score(
                proposal, owners, ratings.score_for(proposal.id), self.params, now, display_ids
            )
            if detail.skip_reason == SKIP_INVALID_CREATED_AT:
                logger.warning("proposal_created_at_invalid", proposal_id=proposal.id)
            elif detail.skip_reason == SKIP_NO_COMMUNITY_REVIEWS:
                stats["proposals_with_no_community_reviews"] += 1
            elif detail.skip_reason == SKIP_NOT_REWARD_OR_PENALTY:
                stats["not_reward_or_penalty_class"] += 1
            details.append(detail)

            base_entry = detail.to_dict()
            for actor_id in owners.owner_ids:
                entry = dict(base_entry)
                entry["user_id"] = actor_id
                entry["collection_id"] = display_id_for(actor_id, display_ids)
                entry["role"] = owners.role_of(actor_id)
                attributions.append(Attribution(actor_id, detail, entry))
                stats["total_user_attributions"] += 1

        return RecordScores(details=details, attributions=attributions, stats=stats)

    def summarize_actor(self, attributions: list[Attribution]) -> tuple[float, dict[str, Any]]:
        positive = float(sum(a.detail.proposal_reward for a in attributions))
        negative = float(sum(a.detail.proposal_penalty for a in attributions))
        score = (
            self.params.funded_concluded_reward_weight * positive
            - self.params.unfunded_penalty_weight * negative
        )
        return score, {"proposal_positive_sum": positive, "proposal_negative_sum": negative}
