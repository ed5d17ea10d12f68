"""
Run one reputation algorithm against the local object store.

Reads the snapshot from <storage root>/snapshots/<run_id>/deepfunding.db unless
the data-source parameter is given, writes the CSV and details JSON next to it
and prints the output keys as JSON.

Usage:
  py -m backend_reputation.tools.run_algorithm --run-id demo --algorithm contribution_score \
      --param comment_base_score=10 --param engagement_window_months=12
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone

from backend_reputation.agent_worker.tasks import ALGORITHMS, AlgorithmRequest, run_algorithm
from backend_reputation.analysis_engine.time_weight import parse_timestamp
from backend_reputation.config import get_settings
from backend_reputation.core.exceptions import ReputationError
from backend_reputation.reputation_logging import configure_structlog, get_logger
from backend_reputation.storage import LocalObjectStore, ObjectNotFoundError, get_deepfunding_db_key

logger = get_logger(__name__)


def parse_param(raw: str) -> tuple[str, str]:
    """'key=value' -> (key, value); raises argparse.ArgumentTypeError otherwise."""
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    return key.strip(), value.strip()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a reputation algorithm on a stored snapshot.")
    parser.add_argument("--run-id", required=True)
    parser.add_argument("--algorithm", required=True, choices=sorted(ALGORITHMS))
    parser.add_argument("--version", default="v1")
    parser.add_argument("--param", action="append", default=[], type=parse_param, metavar="KEY=VALUE")
    parser.add_argument("--now", default=None, help="ISO-8601 reference time (default: current UTC time)")
    args = parser.parse_args(argv)

    now = parse_timestamp(args.now) if args.now else datetime.now(timezone.utc)
    if now is None:
        parser.error(f"--now is not an ISO-8601 timestamp: {args.now!r}")

    settings = get_settings()
    configure_structlog(level=settings.log_level)
    params = list(args.param)
    if not any(key == settings.db_key_param for key, _ in params):
        params.append((settings.db_key_param, get_deepfunding_db_key(args.run_id)))

    request = AlgorithmRequest(
        run_id=args.run_id,
        algorithm_key=args.algorithm,
        algorithm_version=args.version,
        parameters=params,
    )
    store = LocalObjectStore(settings.storage_root)

    try:
        result = run_algorithm(
            request,
            store,
            now=now,
            db_key_param=settings.db_key_param,
        )
    except ReputationError as e:
        print(json.dumps({"error": e.to_dict()}, default=str), file=sys.stderr)
        return 2
    except ObjectNotFoundError as e:
        logger.error("run_algorithm_snapshot_missing", run_id=args.run_id, key=e.key)
        print(json.dumps({"error": {"code": "NOT_FOUND", "message": str(e)}}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
