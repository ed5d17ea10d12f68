"""
Structured logging for Backend Reputation.

JSON logs with timestamp, run_id, event_type and anomaly counters.
Use get_logger() in all engine modules for aggregation-friendly output.
"""

from backend_reputation.reputation_logging.logger import bind_run, configure_structlog, get_logger

__all__ = ["bind_run", "configure_structlog", "get_logger"]
