"""
Signal aggregation: votes and reviews folded per target record.

- Comment votes: approve/disapprove counts per comment, keeping approver ids
  so the owner-bonus rule can ask "did any owner upvote this".
- Community reviews: rating sum/count per proposal, normalized by the max rating.

Unrecognized vote polarities and unusable ratings are ignored and counted, never raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from backend_reputation.database.models import CommentVoteRecord, ReviewRecord
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)

VOTE_UPVOTE = "upvote"
VOTE_DOWNVOTE = "downvote"

REVIEW_TYPE_COMMUNITY = "community"
MAX_RATING = 5.0


@dataclass
class VoteStats:
    upvotes: int = 0
    downvotes: int = 0
    upvoter_ids: set[int] = field(default_factory=set)


@dataclass
class VoteIndex:
    by_comment: dict[int, VoteStats] = field(default_factory=dict)
    ignored_votes: int = 0

    def stats_for(self, comment_id: int) -> VoteStats:
        stats = self.by_comment.get(comment_id)
        return stats if stats is not None else VoteStats()


def aggregate_votes_by_comment(votes: Iterable[CommentVoteRecord]) -> VoteIndex:
    """Tally upvotes/downvotes per comment id; any other vote_type, case included, is skipped."""
    index = VoteIndex()
    for vote in votes:
        polarity = vote.vote_type
        if vote.comment_id is None or polarity not in (VOTE_UPVOTE, VOTE_DOWNVOTE):
            index.ignored_votes += 1
            continue
        entry = index.by_comment.setdefault(vote.comment_id, VoteStats())
        if polarity == VOTE_UPVOTE:
            entry.upvotes += 1
            entry.upvoter_ids.add(vote.voter_id)
        else:
            entry.downvotes += 1
    if index.ignored_votes:
        logger.warning("signals_votes_ignored", ignored_votes=index.ignored_votes)
    return index


@dataclass
class RatingStats:
    total: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class CommunityScore:
    """count of community reviews, their average and avg / MAX_RATING (None without reviews)."""

    count: int
    avg: float | None
    norm: float | None


@dataclass
class CommunityRatingIndex:
    by_proposal: dict[int, RatingStats] = field(default_factory=dict)
    invalid_ratings: int = 0

    def score_for(self, proposal_id: int) -> CommunityScore:
        stats = self.by_proposal.get(proposal_id)
        if stats is None or stats.count == 0:
            return CommunityScore(count=0, avg=None, norm=None)
        avg = stats.total / stats.count
        return CommunityScore(count=stats.count, avg=avg, norm=avg / MAX_RATING)


def _parse_rating(raw: str) -> float | None:
    try:
        rating = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(rating):
        return None
    return rating


def aggregate_community_ratings(reviews: Iterable[ReviewRecord]) -> CommunityRatingIndex:
    """
    Sum community ratings per proposal.

    Only review_type == "community" with a proposal id and a finite rating >= 0
    counts. Non-numeric ratings on community reviews are counted as invalid.
    """
    index = CommunityRatingIndex()
    for review in reviews:
        if review.review_type != REVIEW_TYPE_COMMUNITY or not review.proposal_id:
            continue
        rating = _parse_rating(review.overall_rating)
        if rating is None:
            index.invalid_ratings += 1
            continue
        if rating < 0:
            continue
        entry = index.by_proposal.setdefault(review.proposal_id, RatingStats())
        entry.total += rating
        entry.count += 1
    if index.invalid_ratings:
        logger.warning("signals_review_ratings_invalid", invalid_ratings=index.invalid_ratings)
    return index
