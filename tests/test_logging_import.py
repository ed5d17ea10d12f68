"""
Test that reputation_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from reputation_logging and use the logger."""
    from backend_reputation.reputation_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_run_logger():
    """bind_run returns a logger usable with run context already attached."""
    from backend_reputation.reputation_logging import bind_run

    log = bind_run("run-1", "contribution_score")
    log.info("algorithm_run_start", total_seen=0)
    log.warning("comment_created_at_invalid", comment_id=1)


def test_event_renamed_to_event_type():
    """structlog's 'event' key is exposed as event_type; timestamps are always added."""
    from backend_reputation.reputation_logging.logger import _add_timestamp, _normalize_event

    out = _normalize_event(None, "info", {"event": "scores_computed", "total_scored": 3})
    assert out == {"event_type": "scores_computed", "total_scored": 3}
    out = _add_timestamp(None, "info", {})
    assert "timestamp" in out
    assert _add_timestamp(None, "info", {"timestamp": "fixed"})["timestamp"] == "fixed"


def test_get_logger_binds_module_name():
    """Module loggers can be created at import time and carry their name on every event."""
    from structlog.testing import capture_logs

    from backend_reputation.reputation_logging import get_logger

    with capture_logs() as logs:
        get_logger("backend_reputation.analysis_engine.scorer").info("scores_computed", total_scored=2)
    assert logs == [
        {
            "event": "scores_computed",
            "log_level": "info",
            "logger": "backend_reputation.analysis_engine.scorer",
            "total_scored": 2,
        }
    ]


def test_reconfigure_reaches_loggers_bound_at_import():
    """configure_structlog() keeps the processor chain object and moves the level filter."""
    import pytest
    import structlog

    from backend_reputation.reputation_logging.logger import _filter_by_level, configure_structlog

    chain = structlog.get_config()["processors"]
    try:
        configure_structlog(level="ERROR")
        assert structlog.get_config()["processors"] is chain
        with pytest.raises(structlog.DropEvent):
            _filter_by_level(None, "info", {"event": "scores_computed"})
        assert _filter_by_level(None, "error", {"event": "x"}) == {"event": "x"}
    finally:
        configure_structlog()
    assert _filter_by_level(None, "info", {"event": "x"}) == {"event": "x"}
