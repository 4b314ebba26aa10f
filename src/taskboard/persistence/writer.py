"""SaveQueue - write-behind persistence with a single ordered worker."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from taskboard.persistence.exceptions import SaveQueueClosedError

if TYPE_CHECKING:
    from taskboard.board_store.models import Snapshot
    from taskboard.persistence.adapter import SnapshotAdapter

logger = logging.getLogger("taskboard.persistence.writer")


@dataclass(frozen=True)
class SaveJob:
    """One pending write, numbered in submission order."""

    sequence: int
    user_id: str
    snapshot: Snapshot


class SaveQueue:
    """Runs SnapshotAdapter.save on a background thread, strictly FIFO.

    One worker drains the queue, so a later snapshot is always written after
    an earlier one and can never be overwritten by it.
    """

    def __init__(self, adapter: SnapshotAdapter) -> None:
        self._adapter = adapter
        self._queue: queue.Queue[SaveJob | None] = queue.Queue()
        self._sequence = 0
        self._submit_lock = threading.Lock()
        self._closed = False
        self.failed_count = 0
        self.last_written: int = 0
        self._worker = threading.Thread(
            target=self._run, name="taskboard-save-queue", daemon=True
        )
        self._worker.start()

    @property
    def pending(self) -> int:
        """Approximate number of writes not yet finished."""
        return self._queue.unfinished_tasks

    def submit(self, user_id: str, snapshot: Snapshot) -> int:
        """Queue a snapshot for saving.

        Returns:
            Sequence number of the job.

        Raises:
            SaveQueueClosedError: If close() was already called.
        """
        with self._submit_lock:
            if self._closed:
                raise SaveQueueClosedError("SaveQueue is closed")
            self._sequence += 1
            job = SaveJob(sequence=self._sequence, user_id=user_id, snapshot=snapshot)
            self._queue.put(job)
        return job.sequence

    def flush(self) -> None:
        """Block until every queued save has been attempted."""
        self._queue.join()

    def close(self) -> None:
        """Flush pending saves and stop the worker. Safe to call twice."""
        with self._submit_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(None)
        self._worker.join()

    def _run(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is None:
                    return
                if not self._adapter.save(job.user_id, job.snapshot):
                    self.failed_count += 1
                    logger.error("Queued save #%d for user %s failed", job.sequence, job.user_id)
                self.last_written = job.sequence
            except Exception:
                # Keep the worker alive; the next snapshot supersedes this one.
                self.failed_count += 1
                logger.exception("Queued save #%d crashed", job.sequence)
            finally:
                self._queue.task_done()
