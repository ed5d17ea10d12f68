"""
Main entrypoint: run one reputation algorithm against the local object store.

Thin wrapper around backend_reputation.tools.run_algorithm so the worker can be
started from the project root:

    python main.py --run-id demo --algorithm proposal_engagement \
        --param engagement_window_months=12 --param funded_concluded_reward_weight=1

Env: REPUTATION_STORAGE_ROOT, REPUTATION_DB_KEY_PARAM, LOG_LEVEL, LOG_FORMAT.
"""

from backend_reputation.config.env import load_reputation_env
from backend_reputation.tools.run_algorithm import main

if __name__ == "__main__":
    load_reputation_env()
    raise SystemExit(main())
