"""
Algorithm run task: the single entry point the orchestrator invokes.

Responsibilities:
- Accept a run request {runId, algorithmKey, algorithmVersion, parameters}.
- Resolve the scoring strategy and its parameters before any I/O.
- Fetch the relational snapshot, score it, render both artifacts in memory,
  then store them and return their keys.

The object store is passed in by the caller; configuration errors are raised
with run_id in their context and are never retried here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from backend_reputation.analysis_engine.contribution import ContributionStrategy
from backend_reputation.analysis_engine.engagement import EngagementStrategy
from backend_reputation.analysis_engine.params import (
    ContributionScoreParams,
    InputEntries,
    ProposalEngagementParams,
    get_input_value,
    normalize_inputs,
)
from backend_reputation.analysis_engine.report import (
    CSV_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    render_details_json,
    render_table_csv,
)
from backend_reputation.analysis_engine.scorer import ScoringStrategy, compute_scores, ensure_utc
from backend_reputation.config.env import DEFAULT_DB_KEY_PARAM
from backend_reputation.core.exceptions import MissingInputError, ReputationError, UnsupportedAlgorithmError
from backend_reputation.database.connection import open_snapshot_db
from backend_reputation.database.repositories import load_snapshot
from backend_reputation.reputation_logging import bind_run
from backend_reputation.storage.keys import generate_snapshot_key
from backend_reputation.storage.object_store import ObjectStore

StrategyFactory = Callable[[InputEntries], ScoringStrategy]

ALGORITHMS: dict[str, StrategyFactory] = {
    ContributionStrategy.algorithm_key: lambda inputs: ContributionStrategy(
        ContributionScoreParams.from_inputs(inputs)
    ),
    EngagementStrategy.algorithm_key: lambda inputs: EngagementStrategy(
        ProposalEngagementParams.from_inputs(inputs)
    ),
}


@dataclass
class AlgorithmRequest:
    """One run of one algorithm, as sent by the orchestrator."""

    run_id: str
    algorithm_key: str
    algorithm_version: str = ""
    parameters: list[tuple[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AlgorithmRequest":
        """Build from camelCase (runId) or snake_case (run_id) keys."""

        def pick(*names: str) -> Any:
            for name in names:
                if payload.get(name) is not None:
                    return payload[name]
            return None

        run_id = pick("runId", "run_id")
        if not isinstance(run_id, str) or not run_id.strip():
            raise MissingInputError("run_id")
        algorithm_key = pick("algorithmKey", "algorithm_key")
        if not isinstance(algorithm_key, str) or not algorithm_key.strip():
            raise MissingInputError("algorithm_key")
        return cls(
            run_id=run_id,
            algorithm_key=algorithm_key,
            algorithm_version=str(pick("algorithmVersion", "algorithm_version") or ""),
            parameters=normalize_inputs(pick("parameters", "inputs")),
        )


def build_strategy(algorithm_key: str, inputs: InputEntries) -> ScoringStrategy:
    factory = ALGORITHMS.get(algorithm_key)
    if factory is None:
        raise UnsupportedAlgorithmError(algorithm_key)
    return factory(inputs)


def output_names(algorithm_key: str) -> tuple[str, str]:
    """(table output name, details output name)."""
    return algorithm_key, f"{algorithm_key}_details"


def run_algorithm(
    request: AlgorithmRequest,
    storage: ObjectStore,
    *,
    now: datetime | None = None,
    db_key_param: str = DEFAULT_DB_KEY_PARAM,
) -> dict[str, Any]:
    """
    Execute one algorithm run and return {"outputs": {name: storage_key}}.

    Nothing is written unless both artifacts rendered successfully.
    """
    log = bind_run(request.run_id, request.algorithm_key)
    run_now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)

    try:
        strategy = build_strategy(request.algorithm_key, request.parameters)
        db_key = get_input_value(request.parameters, db_key_param)
    except ReputationError as e:
        e.context.setdefault("run_id", request.run_id)
        log.error("algorithm_run_config_error", code=e.code, error=e.message, context=e.context)
        raise

    log.info(
        "algorithm_run_start",
        algorithm_version=request.algorithm_version,
        data_source_key=db_key,
        params=strategy.params_dict(),
        now=run_now.isoformat(),
    )

    db_bytes = storage.get(db_key)
    with open_snapshot_db(db_bytes, run_id=request.run_id) as conn:
        data = load_snapshot(conn, tables=strategy.tables)

    result = compute_scores(strategy, data, run_now)
    table_body = render_table_csv(result)
    details_body = render_details_json(
        result,
        run_id=request.run_id,
        algorithm_version=request.algorithm_version,
        generated_at=run_now,
        data_source_key=db_key,
    )

    table_name, details_name = output_names(request.algorithm_key)
    table_key = storage.put(
        generate_snapshot_key(request.run_id, f"{table_name}.csv"), table_body, CSV_CONTENT_TYPE
    )
    details_key = storage.put(
        generate_snapshot_key(request.run_id, f"{details_name}.json"), details_body, JSON_CONTENT_TYPE
    )

    log.info(
        "algorithm_run_done",
        table_key=table_key,
        details_key=details_key,
        **result.stats,
    )
    return {"outputs": {table_name: table_key, details_name: details_key}}
