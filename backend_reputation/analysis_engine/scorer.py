"""
Scoring pipeline shared by every algorithm.

Responsibilities:
- Normalize the run's "now" to UTC and build the actor display-id map.
- Ask the strategy for one detail per input record plus its attributions.
- Hand everything to the report builder for grouping, ordering and stats.

Algorithms differ only in their ScoringStrategy; the pipeline itself never
branches on the algorithm key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Iterable

from backend_reputation.analysis_engine.models import Attribution, RecordScores, ScoringResult
from backend_reputation.analysis_engine.report import build_scoring_result
from backend_reputation.database.models import SnapshotData, UserRecord
from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)


class ScoringStrategy(ABC):
    """Per-record scoring rules plugged into compute_scores."""

    algorithm_key: str = ""
    # snapshot tables the strategy reads; load_snapshot skips the rest
    tables: tuple[str, ...] = ()

    @abstractmethod
    def params_dict(self) -> dict[str, Any]:
        """Resolved parameters as written to the detail file."""

    @abstractmethod
    def score_records(self, data: SnapshotData, now: datetime, display_ids: dict[int, str]) -> RecordScores:
        """Score every input record; must not mutate data."""

    @abstractmethod
    def summarize_actor(self, attributions: list[Attribution]) -> tuple[float, dict[str, Any]]:
        """Final score and extra summary fields for one actor's attributions."""


def ensure_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def build_display_ids(users: Iterable[UserRecord]) -> dict[int, str]:
    return {u.id: u.collection_id for u in users if u.collection_id}


def display_id_for(actor_id: int, display_ids: dict[int, str]) -> str:
    """collection_id of the actor, or its numeric id when it has none."""
    return display_ids.get(actor_id) or str(actor_id)


def compute_scores(strategy: ScoringStrategy, data: SnapshotData, now: datetime) -> ScoringResult:
    """Run one strategy over a loaded snapshot."""
    now = ensure_utc(now)
    display_ids = build_display_ids(data.users)
    scores = strategy.score_records(data, now, display_ids)
    result = build_scoring_result(
        algorithm_key=strategy.algorithm_key,
        params=strategy.params_dict(),
        scores=scores,
        roster=[u.id for u in data.users],
        display_ids=display_ids,
        summarize=strategy.summarize_actor,
    )
    logger.info(
        "scores_computed",
        algorithm_key=strategy.algorithm_key,
        total_seen=result.stats["total_seen"],
        total_scored=result.stats["total_scored"],
        actor_count=len(result.actors),
    )
    return result
