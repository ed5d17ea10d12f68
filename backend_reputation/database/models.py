"""
Domain models for snapshot entities.

Users, comments, comment votes, proposals and reviews as read from a run's
snapshot database. Used by the repository layer and the analysis engine; no ORM
coupling. All records are immutable inputs to a single run.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserRecord:
    """Community member (actor) from the users table."""

    id: int
    collection_id: str
    """Display / collection identifier written to the result table."""
    user_name: str = ""
    total_proposals: int | None = None


@dataclass(frozen=True)
class CommentRecord:
    """Single comment on a proposal."""

    comment_id: int
    parent_id: int
    is_reply: bool
    user_id: int
    proposal_id: int
    created_at: str
    """Raw creation timestamp as stored; may be unparsable."""
    updated_at: str = ""


@dataclass(frozen=True)
class CommentVoteRecord:
    """Vote on a comment. vote_type is normally 'upvote' or 'downvote'."""

    voter_id: int
    comment_id: int | None
    """None when the stored comment id is not an integer."""
    vote_type: str
    created_at: str | None = None


@dataclass(frozen=True)
class ProposalRecord:
    """Funding proposal; team_members is the raw JSON blob from the snapshot."""

    id: int
    round_id: int
    pool_id: int
    proposer_id: int
    is_awarded: bool
    is_completed: bool
    created_at: str
    team_members: str = "[]"


@dataclass(frozen=True)
class ReviewRecord:
    """Review of a proposal. overall_rating is kept as the stored text."""

    review_id: int
    proposal_id: int | None
    reviewer_id: int | None
    review_type: str
    overall_rating: str
    created_at: str | None = None


@dataclass
class SnapshotData:
    """Fully materialized snapshot tables for one run."""

    users: list[UserRecord] = field(default_factory=list)
    comments: list[CommentRecord] = field(default_factory=list)
    comment_votes: list[CommentVoteRecord] = field(default_factory=list)
    proposals: list[ProposalRecord] = field(default_factory=list)
    reviews: list[ReviewRecord] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "user_count": len(self.users),
            "comment_count": len(self.comments),
            "comment_vote_count": len(self.comment_votes),
            "proposal_count": len(self.proposals),
            "review_count": len(self.reviews),
        }
