"""Persistence - Durable per-user snapshot storage."""

from taskboard.persistence.adapter import (
    DEFAULT_NAMESPACE,
    SnapshotAdapter,
    decode_snapshot,
    encode_snapshot,
    storage_key,
)
from taskboard.persistence.database import Database
from taskboard.persistence.exceptions import (
    PersistenceError,
    SaveQueueClosedError,
    SnapshotDecodeError,
)
from taskboard.persistence.models import StoredSnapshot
from taskboard.persistence.writer import SaveQueue

__all__ = [
    "DEFAULT_NAMESPACE",
    "Database",
    "PersistenceError",
    "SaveQueue",
    "SaveQueueClosedError",
    "SnapshotAdapter",
    "SnapshotDecodeError",
    "StoredSnapshot",
    "decode_snapshot",
    "encode_snapshot",
    "storage_key",
]
