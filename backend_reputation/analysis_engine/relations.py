"""
Relation resolver: who owns (or has a stake in) which proposal.

A proposer is always related to their proposal; every parseable id in the
proposal's team_members JSON blob is related too. A blob that fails to parse is
treated as "no team members" for that proposal and only counted.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from backend_reputation.database.models import ProposalRecord
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)


def _member_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def parse_team_members(blob: str | None) -> tuple[list[int], bool]:
    """
    Parse a team_members JSON blob into a list of actor ids.

    Returns (ids, ok). ok is False when the blob is not a JSON array; ids is
    then empty. Non-numeric entries inside a valid array are dropped silently.
    """
    if blob is None or not str(blob).strip():
        return [], True
    try:
        raw = json.loads(blob)
    except (TypeError, ValueError):
        return [], False
    if not isinstance(raw, list):
        return [], False
    ids = [m for m in (_member_id(x) for x in raw) if m is not None]
    return ids, True


@dataclass(frozen=True)
class ProposalOwners:
    """Owners of one proposal, sorted for deterministic output."""

    proposal_id: int
    proposer_id: int
    team_member_ids: tuple[int, ...]
    owner_ids: tuple[int, ...]

    def role_of(self, actor_id: int) -> str:
        return "proposer" if actor_id == self.proposer_id else "team_member"


def resolve_proposal_owners(proposal: ProposalRecord) -> tuple[ProposalOwners, bool]:
    """Return the proposal's owners and whether its team blob parsed."""
    members, ok = parse_team_members(proposal.team_members)
    team = tuple(sorted(set(members)))
    owners = tuple(sorted({proposal.proposer_id, *team}))
    return ProposalOwners(proposal.id, proposal.proposer_id, team, owners), ok


@dataclass
class RelationIndex:
    """
    Lookup structures built once per run.

    related: (actor_id, proposal_id) pairs where the actor is proposer or team member.
    owners: proposal_id -> set of owner actor ids.
    proposal_owners: proposal_id -> resolved owners with roles, shared by the scorers.
    """

    related: set[tuple[int, int]] = field(default_factory=set)
    owners: dict[int, set[int]] = field(default_factory=dict)
    proposal_owners: dict[int, ProposalOwners] = field(default_factory=dict)
    malformed_team_members: int = 0

    def is_related(self, actor_id: int, proposal_id: int) -> bool:
        return (actor_id, proposal_id) in self.related

    def owners_of(self, proposal_id: int) -> set[int]:
        return self.owners.get(proposal_id, set())


def build_relation_index(proposals: Iterable[ProposalRecord]) -> RelationIndex:
    """Build relation pairs and owner sets for all proposals."""
    index = RelationIndex()
    for proposal in proposals:
        owners, ok = resolve_proposal_owners(proposal)
        if not ok:
            index.malformed_team_members += 1
            logger.warning(
                "relations_team_members_malformed",
                proposal_id=proposal.id,
                team_members=str(proposal.team_members)[:64],
            )
        index.proposal_owners[proposal.id] = owners
        owner_set = index.owners.setdefault(proposal.id, set())
        for actor_id in owners.owner_ids:
            owner_set.add(actor_id)
            index.related.add((actor_id, proposal.id))
    return index
