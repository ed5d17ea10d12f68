"""
Structured JSON logging for algorithm runs: timestamp, run_id, event_type, counters.

structlog renders one JSON object per line on stderr (stdout is left to CLI
output). Engine modules call get_logger(__name__) and log a snake_case
event_type plus keyword context; the worker binds run_id / algorithm_key once
per run via bind_run().

LOG_LEVEL (default INFO) and LOG_FORMAT (json | console, default json) are read
on first import; CLI entrypoints may call configure_structlog() again with the
values from Settings.

Uses only Python stdlib logging and structlog; no backend_reputation imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"


def _level_value(name: str | None) -> int:
    level = (name or os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    value = logging.getLevelName(level)
    return value if isinstance(value, int) else logging.INFO


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Wall-clock ISO 8601 timestamp; a run's own 'now' travels as a separate key."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog 'event' -> event_type, so every line has the same primary key."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


_min_level = logging.INFO

_METHOD_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "msg": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "exception": logging.ERROR,
    "critical": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}


def _filter_by_level(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop events below the configured level; read per call so reconfiguring reaches bound loggers."""
    if _METHOD_LEVELS.get(method_name, logging.INFO) < _min_level:
        raise structlog.DropEvent
    return event_dict


def configure_structlog(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog; None falls back to LOG_LEVEL / LOG_FORMAT.

    Module loggers are bound at import, so the processor chain is swapped in
    place rather than replaced.
    """
    global _min_level
    _min_level = _level_value(level)
    log_format = (fmt or os.getenv("LOG_FORMAT") or DEFAULT_LOG_FORMAT).strip().lower()
    processors: list[Any] = [
        _filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        # params and stats dicts are logged whole; default=str keeps odd values printable
        processors.append(structlog.processors.JSONRenderer(sort_keys=True, default=str))
    if structlog.is_configured():
        current = structlog.get_config()["processors"]
        current[:] = processors
        processors = current
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.warning("comment_created_at_invalid", comment_id=17)
    Output (JSON): {"event_type": "comment_created_at_invalid", "comment_id": 17, "level": "warning", "logger": "...", "timestamp": "..."}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_run(run_id: str, algorithm_key: str | None = None) -> structlog.BoundLogger:
    """Return a logger with run_id (and algorithm_key) bound to all subsequent log calls."""
    bound = get_logger("backend_reputation.run").bind(run_id=run_id)
    if algorithm_key:
        bound = bound.bind(algorithm_key=algorithm_key)
    return bound
