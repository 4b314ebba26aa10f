"""SnapshotAdapter - per-user key/value storage of serialized snapshots."""

from __future__ import annotations

import logging
import threading

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from taskboard.board_store.models import Snapshot
from taskboard.logging import preview_payload
from taskboard.persistence.database import Database
from taskboard.persistence.exceptions import PersistenceError, SnapshotDecodeError
from taskboard.persistence.models import StoredSnapshot

logger = logging.getLogger("taskboard.persistence")

DEFAULT_NAMESPACE = "taskApp_boards"


def storage_key(namespace: str, user_id: str) -> str:
    """Key a user's snapshot is stored under, e.g. "taskApp_boards_123456"."""
    return f"{namespace}_{user_id}"


def encode_snapshot(snapshot: Snapshot) -> str:
    """Serialize to the durable JSON shape: ``{"boards": [...]}``, camelCase keys."""
    return snapshot.model_dump_json(by_alias=True, exclude_none=True)


def decode_snapshot(payload: str) -> Snapshot:
    """Parse a stored payload.

    Raises:
        SnapshotDecodeError: If the payload is not JSON or not a valid Snapshot.
    """
    try:
        return Snapshot.model_validate_json(payload)
    except ValidationError as e:
        raise SnapshotDecodeError(f"Stored snapshot is invalid: {e.error_count()} error(s)") from e


class SnapshotAdapter:
    """Loads and saves one Snapshot per user.

    Pure get/set: no business rules. Writes are serialized through a lock,
    and every row carries a revision counter bumped on each save.
    """

    def __init__(self, database: Database, namespace: str = DEFAULT_NAMESPACE) -> None:
        """Initialize the adapter.

        Args:
            database: Database with the snapshot table created.
            namespace: Prefix for storage keys.
        """
        self._db = database
        self.namespace = namespace
        self._write_lock = threading.Lock()

    def key_for(self, user_id: str) -> str:
        return storage_key(self.namespace, user_id)

    def load(self, user_id: str) -> Snapshot | None:
        """Load the stored snapshot for a user.

        Args:
            user_id: The user's identifier

        Returns:
            The Snapshot, or None if nothing is stored or the payload is corrupt

        Raises:
            PersistenceError: If the database itself cannot be read
        """
        key = self.key_for(user_id)
        session = self._db.get_session()
        try:
            row = session.get(StoredSnapshot, key)
            payload = row.payload if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read snapshot '{key}'") from e
        finally:
            session.close()

        if payload is None:
            logger.debug("No stored snapshot under %s", key)
            return None

        try:
            snapshot = decode_snapshot(payload)
        except SnapshotDecodeError as e:
            logger.warning(
                "Ignoring unreadable snapshot under %s: %s (payload=%s)",
                key,
                e,
                preview_payload(payload),
            )
            return None

        logger.debug("Loaded snapshot under %s (%d boards)", key, len(snapshot.boards))
        return snapshot

    def save(self, user_id: str, snapshot: Snapshot) -> bool:
        """Store a snapshot for a user, replacing any previous one.

        Args:
            user_id: The user's identifier
            snapshot: The snapshot to store

        Returns:
            True if written. Failures are logged and reported as False.
        """
        key = self.key_for(user_id)
        try:
            payload = encode_snapshot(snapshot)
        except (ValueError, TypeError) as e:
            logger.error("Failed to serialize snapshot for %s: %s", key, e)
            return False

        with self._write_lock:
            try:
                with self._db.transaction() as session:
                    row = session.get(StoredSnapshot, key)
                    if row is None:
                        session.add(StoredSnapshot(key=key, payload=payload))
                        revision = 1
                    else:
                        row.payload = payload
                        row.revision += 1
                        revision = row.revision
            except SQLAlchemyError as e:
                logger.error("Failed to save snapshot under %s: %s", key, e)
                return False

        logger.debug("Saved snapshot under %s (revision=%d)", key, revision)
        return True

    def revision(self, user_id: str) -> int:
        """Number of saves recorded for a user (0 if never saved)."""
        session = self._db.get_session()
        try:
            row = session.get(StoredSnapshot, self.key_for(user_id))
            return row.revision if row is not None else 0
        finally:
            session.close()

    def delete(self, user_id: str) -> bool:
        """Remove a user's durable snapshot.

        Returns:
            True if a row was removed.
        """
        key = self.key_for(user_id)
        with self._write_lock, self._db.transaction() as session:
            row = session.get(StoredSnapshot, key)
            if row is None:
                return False
            session.delete(row)
        logger.info("Deleted snapshot under %s", key)
        return True
