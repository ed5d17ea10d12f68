"""
Analysis engine package: reputation scores from snapshot interactions.

Consumes users, comments, votes, proposals and reviews loaded from a snapshot,
applies time decay, self-interaction discounts and owner bonuses, and produces
per-actor scores with a full per-record audit trail.
"""

from backend_reputation.analysis_engine.contribution import ContributionStrategy
from backend_reputation.analysis_engine.engagement import EngagementStrategy
from backend_reputation.analysis_engine.models import (
    ActorSummary,
    CommentScoreDetail,
    ProposalScoreDetail,
    ScoringResult,
)
from backend_reputation.analysis_engine.params import (
    ContributionScoreParams,
    ProposalEngagementParams,
)
from backend_reputation.analysis_engine.report import (
    render_details_json,
    render_table_csv,
)
from backend_reputation.analysis_engine.scorer import ScoringStrategy, compute_scores
from backend_reputation.analysis_engine.time_weight import (
    TimeWeight,
    TimeWeightParams,
    compute_time_weight,
)

__all__ = [
    "ContributionStrategy",
    "EngagementStrategy",
    "ActorSummary",
    "CommentScoreDetail",
    "ProposalScoreDetail",
    "ScoringResult",
    "ContributionScoreParams",
    "ProposalEngagementParams",
    "render_details_json",
    "render_table_csv",
    "ScoringStrategy",
    "compute_scores",
    "TimeWeight",
    "TimeWeightParams",
    "compute_time_weight",
]
