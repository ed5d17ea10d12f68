"""
Object storage boundary: fetch snapshot bytes, store run artifacts.
"""

from backend_reputation.storage.keys import generate_snapshot_key, get_deepfunding_db_key
from backend_reputation.storage.object_store import (
    LocalObjectStore,
    ObjectNotFoundError,
    ObjectStore,
)

__all__ = [
    "LocalObjectStore",
    "ObjectNotFoundError",
    "ObjectStore",
    "generate_snapshot_key",
    "get_deepfunding_db_key",
]
