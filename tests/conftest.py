"""
Pytest fixtures for reputation tests: fixed clock, in-memory object store, snapshot builder.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from backend_reputation.database.init_tables import build_snapshot_bytes
from backend_reputation.storage.object_store import ObjectNotFoundError

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class InMemoryObjectStore:
    """Dict-backed ObjectStore; records every put with its content type."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.puts: list[str] = []

    def get(self, key: str) -> bytes:
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        return self.objects[key]

    def put(self, key: str, body: bytes, content_type: str) -> str:
        self.objects[key] = body
        self.content_types[key] = content_type
        self.puts.append(key)
        return key


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def days_ago(now) -> Callable[[float], str]:
    """Return an ISO-8601 'Z' timestamp the given number of days before now."""

    def _ago(days: float) -> str:
        return (now - timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%SZ")

    return _ago


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def snapshot_bytes() -> Callable[..., bytes]:
    """Build a real SQLite snapshot from table rows: snapshot_bytes(users=[...], comments=[...])."""

    def _build(**tables: list[dict[str, Any]]) -> bytes:
        return build_snapshot_bytes(tables)

    return _build
