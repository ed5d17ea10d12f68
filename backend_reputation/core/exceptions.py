"""
Application-level exceptions.

Configuration errors abort a run before any scoring and carry enough context
(run_id, parameter name, offending value) to diagnose without re-running.
Infrastructure errors (storage, sqlite) are not wrapped; they propagate as raised.
"""

from __future__ import annotations

from typing import Any


class ReputationError(Exception):
    """Base error with a stable code and structured context."""

    def __init__(self, message: str, code: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context: dict[str, Any] = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": self.context}


class ConfigurationError(ReputationError):
    """Fatal run configuration problem; never retried by the engine."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR", context: dict[str, Any] | None = None) -> None:
        super().__init__(message, code, context)


class MissingInputError(ConfigurationError):
    """A required run parameter is absent or not a string."""

    def __init__(self, input_key: str) -> None:
        super().__init__(f"Missing required input: {input_key}", "MISSING_INPUT", {"input_key": input_key})
        self.input_key = input_key


class InvalidParameterError(ConfigurationError):
    """A run parameter is present but not a usable number."""

    def __init__(self, input_key: str, value: Any, reason: str = "invalid numeric value") -> None:
        super().__init__(
            f'Input "{input_key}" has {reason}: {value!r}',
            "INVALID_PARAMETER",
            {"input_key": input_key, "value": value},
        )
        self.input_key = input_key


class UnsupportedAlgorithmError(ReputationError):
    """The requested algorithm key has no registered scoring strategy."""

    def __init__(self, algorithm_key: str) -> None:
        super().__init__(
            f"Unsupported algorithm: {algorithm_key}",
            "UNSUPPORTED_ALGORITHM",
            {"algorithm_key": algorithm_key},
        )
        self.algorithm_key = algorithm_key
