"""
Object store boundary for snapshot inputs and run artifacts.

The engine only needs two calls: get(key) -> bytes and put(key, bytes,
content_type) -> key. Any object passed to the worker that provides them is a
valid store (an S3/GCS wrapper in production, LocalObjectStore for the CLI, an
in-memory fake in tests). The store is always passed in explicitly; nothing in
the engine holds a process-wide handle.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from backend_reputation.reputation_logging import get_logger

logger = get_logger(__name__)

CONTENT_TYPE_SUFFIX = ".content-type"


class ObjectNotFoundError(Exception):
    """Raised when a key does not exist in the store."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object not found: {key}")
        self.key = key


@runtime_checkable
class ObjectStore(Protocol):
    """Minimal object storage interface consumed by the worker."""

    def get(self, key: str) -> bytes:
        ...

    def put(self, key: str, body: bytes, content_type: str) -> str:
        ...


class LocalObjectStore:
    """
    Filesystem-backed object store.

    Keys map to paths under root ("snapshots/<run>/x.csv" -> root/snapshots/<run>/x.csv).
    The content type is kept in a sidecar file next to the object.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        clean = key.strip().lstrip("/")
        if not clean:
            raise ValueError("Object key must not be empty")
        path = (self.root / clean).resolve()
        root = self.root.resolve()
        if path != root and root not in path.parents:
            raise ValueError(f"Object key escapes storage root: {key}")
        return path

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise ObjectNotFoundError(key)
        data = path.read_bytes()
        logger.debug("object_store_get", key=key, size_bytes=len(data))
        return data

    def put(self, key: str, body: bytes, content_type: str) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)
        sidecar = path.with_name(path.name + CONTENT_TYPE_SUFFIX)
        sidecar.write_text(json.dumps({"content_type": content_type}), encoding="utf-8")
        logger.debug("object_store_put", key=key, size_bytes=len(body), content_type=content_type)
        return key

    def content_type(self, key: str) -> str | None:
        """Return the stored content type for key, or None if unknown."""
        path = self._path(key)
        sidecar = path.with_name(path.name + CONTENT_TYPE_SUFFIX)
        if not sidecar.is_file():
            return None
        return json.loads(sidecar.read_text(encoding="utf-8")).get("content_type")

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
