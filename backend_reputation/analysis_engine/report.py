"""
Report builder: group details per actor, order deterministically, render artifacts.

Two artifacts per run:
- table CSV: collection_id,<algorithm_key> for actors with at least one scored record
- details JSON: params, every actor (scored or not), every record, run stats
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from typing import Any, Callable, Iterable

from backend_reputation.analysis_engine.models import (
    SKIP_INVALID_CREATED_AT,
    SKIP_OUTSIDE_WINDOW,
    ActorSummary,
    Attribution,
    RecordScores,
    ScoreDetail,
    ScoringResult,
)

CSV_CONTENT_TYPE = "text/csv"
JSON_CONTENT_TYPE = "application/json"

Summarizer = Callable[[list[Attribution]], tuple[float, dict[str, Any]]]


def record_sort_key(detail: ScoreDetail) -> tuple[int, float, int]:
    """Valid timestamps first by (time, id); invalid ones after, by id only."""
    if detail.created_ts is None:
        return (1, 0.0, detail.record_id)
    return (0, detail.created_ts.timestamp(), detail.record_id)


def build_actor_summaries(
    attributions: Iterable[Attribution],
    roster: Iterable[int],
    display_ids: dict[int, str],
    summarize: Summarizer,
) -> list[ActorSummary]:
    """
    One summary per actor in roster plus every actor that received an attribution.

    Actors come out sorted by id; each actor's records by record_sort_key.
    """
    by_actor: dict[int, list[Attribution]] = {actor_id: [] for actor_id in roster}
    for attribution in attributions:
        by_actor.setdefault(attribution.actor_id, []).append(attribution)

    summaries: list[ActorSummary] = []
    for actor_id in sorted(by_actor):
        items = sorted(by_actor[actor_id], key=lambda a: record_sort_key(a.detail))
        final_score, extra = summarize(items)
        summaries.append(
            ActorSummary(
                actor_id=actor_id,
                display_id=display_ids.get(actor_id) or str(actor_id),
                final_score=final_score,
                record_count=len(items),
                scored_count=sum(1 for a in items if a.detail.scored),
                records=[a.entry for a in items],
                extra=extra,
            )
        )
    return summaries


def build_run_stats(details: list[ScoreDetail], extra: dict[str, int]) -> dict[str, int]:
    stats = {
        "total_seen": len(details),
        "total_scored": sum(1 for d in details if d.scored),
        "invalid_created_at": sum(1 for d in details if d.skip_reason == SKIP_INVALID_CREATED_AT),
        "outside_engagement_window": sum(1 for d in details if d.skip_reason == SKIP_OUTSIDE_WINDOW),
    }
    stats.update(extra)
    return stats


def build_scoring_result(
    *,
    algorithm_key: str,
    params: dict[str, Any],
    scores: RecordScores,
    roster: Iterable[int],
    display_ids: dict[int, str],
    summarize: Summarizer,
) -> ScoringResult:
    return ScoringResult(
        algorithm_key=algorithm_key,
        params=params,
        actors=build_actor_summaries(scores.attributions, roster, display_ids, summarize),
        records=sorted(scores.details, key=record_sort_key),
        stats=build_run_stats(scores.details, scores.stats),
    )


def render_table_csv(result: ScoringResult) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["collection_id", result.algorithm_key])
    for display_id, score in result.table_rows():
        writer.writerow([display_id, score])
    return buf.getvalue().encode("utf-8")


def render_details_json(
    result: ScoringResult,
    *,
    run_id: str,
    algorithm_version: str,
    generated_at: datetime,
    data_source_key: str,
) -> bytes:
    """Full audit document; generated_at is the run's now, not wall-clock time."""
    document = {
        "run_id": run_id,
        "algorithm_key": result.algorithm_key,
        "algorithm_version": algorithm_version,
        "generated_at": generated_at.isoformat(),
        "data_source_key": data_source_key,
        "params": result.params,
        "actors": [a.to_dict() for a in result.actors],
        "records": [d.to_dict() for d in result.records],
        "stats": result.stats,
    }
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
