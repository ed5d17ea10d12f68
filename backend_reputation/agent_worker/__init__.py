"""
Agent worker package: algorithm run entry point.

Receives a run request from the orchestrator, dispatches it to the matching
scoring strategy and stores the resulting artifacts in the object store.
"""

from backend_reputation.agent_worker.tasks import AlgorithmRequest, run_algorithm

__all__ = ["AlgorithmRequest", "run_algorithm"]
