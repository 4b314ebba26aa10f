"""BoardStore - Main API for board, list and task operations."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from taskboard.board_store import transitions
from taskboard.board_store.exceptions import (
    NoChangeError,
    ReferenceNotFoundError,
    ValidationRejectedError,
)
from taskboard.board_store.models import (
    Board,
    RelocationIntent,
    Snapshot,
    TaskDraft,
    TaskUpdate,
    default_board,
)
from taskboard.board_store.results import MutationResult, RejectionReason
from taskboard.persistence.exceptions import SaveQueueClosedError

if TYPE_CHECKING:
    from taskboard.persistence import SaveQueue, SnapshotAdapter

logger = logging.getLogger("taskboard.board_store")

ChangeListener = Callable[["BoardStore"], None]
Transition = Callable[[Snapshot], tuple[Snapshot, Any]]
M = TypeVar("M", bound=BaseModel)


def _coerce(model: type[M], value: M | Mapping[str, Any]) -> M:
    """Accept a model instance or a plain mapping (camelCase or snake_case keys)."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ValidationRejectedError(f"Invalid {model.__name__} ({fields or 'payload'})") from e


class BoardStore:
    """Owns one user's boards and is the only thing that changes them.

    State is the current Snapshot plus the id of the active board; the
    active Board itself is looked up on read. Every operation validates,
    builds a new snapshot, commits it, saves it for the bound user and
    notifies listeners. Operations never raise for bad input: they return
    a MutationResult describing what happened.
    """

    def __init__(self, adapter: SnapshotAdapter, save_queue: SaveQueue | None = None) -> None:
        """Initialize an unbound store.

        Args:
            adapter: Durable storage for snapshots
            save_queue: Optional write-behind queue. When given, saves are
                queued in order instead of written inline.
        """
        self._adapter = adapter
        self._save_queue = save_queue
        self._lock = threading.RLock()
        self._user_id: str | None = None
        self._snapshot = Snapshot()
        self._active_board_id: str | None = None
        self._listeners: dict[str, ChangeListener] = {}

    # --- Read access ---

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def is_bound(self) -> bool:
        return self._user_id is not None

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def boards(self) -> tuple[Board, ...]:
        return self._snapshot.boards

    @property
    def active_board_id(self) -> str | None:
        return self.active_board.id if self.active_board is not None else None

    @property
    def active_board(self) -> Board | None:
        """The active board, or None if unset or no longer in the snapshot."""
        if self._active_board_id is None:
            return None
        return self._snapshot.find_board(self._active_board_id)

    def get_board(self, board_id: str) -> Board | None:
        return self._snapshot.find_board(board_id)

    # --- Session lifecycle ---

    def bind(self, user_id: str) -> MutationResult:
        """Attach the store to a user and load their boards.

        A stored snapshot becomes the current state; the first board is made
        active unless the active board still resolves. With no stored data
        (or unreadable data) the user gets the default board, which is
        saved immediately.

        Args:
            user_id: Identifier supplied by the auth provider

        Returns:
            Result whose entity_id is the active board id

        Raises:
            PersistenceError: If the database cannot be read at all
        """
        if not user_id or not user_id.strip():
            logger.warning("bind rejected: blank user id")
            return MutationResult.rejected(
                RejectionReason.VALIDATION_REJECTED, "User id is required"
            )

        with self._lock:
            if self._user_id is not None and self._user_id != user_id:
                self.unbind()
            if self._save_queue is not None:
                self._save_queue.flush()

            stored = self._adapter.load(user_id)
            self._user_id = user_id

            if stored is None:
                board = default_board()
                self._snapshot = Snapshot(boards=(board,))
                self._active_board_id = board.id
                persisted = self._persist(user_id)
                message = "Default board created"
                logger.info("Bootstrapped default board %s for user %s", board.id, user_id)
            else:
                self._snapshot = stored
                if self.active_board is None:
                    self._active_board_id = stored.boards[0].id if stored.boards else None
                persisted = True
                message = "Boards loaded"
                logger.info("Loaded %d boards for user %s", len(stored.boards), user_id)

            self._notify()
            return MutationResult(
                ok=True,
                message=message,
                entity_id=self._active_board_id,
                persisted=persisted,
            )

    def unbind(self) -> None:
        """Forget the current user's state. The durable copy is left as is."""
        with self._lock:
            if self._user_id is None:
                return
            if self._save_queue is not None:
                self._save_queue.flush()
            logger.info("Unbinding user %s", self._user_id)
            self._user_id = None
            self._snapshot = Snapshot()
            self._active_board_id = None
            self._notify()

    def close(self) -> None:
        """Flush and stop the write-behind queue, if any."""
        if self._save_queue is not None:
            self._save_queue.close()

    # --- Board Operations ---

    def set_active_board(self, board_id: str) -> MutationResult:
        """Select a board. An unknown id leaves no board selected."""
        with self._lock:
            board = self._snapshot.find_board(board_id)
            self._active_board_id = board.id if board is not None else None
            self._notify()
            if board is None:
                logger.debug("set_active_board: %s not found, selection cleared", board_id)
                return MutationResult.success("No board selected")
            return MutationResult.success("Board selected", entity_id=board.id)

    def create_board(self, title: str) -> MutationResult:
        """Append a board with the default lists and make it active.

        Args:
            title: Board title, must not be blank
        """
        return self._mutate(
            "create_board",
            "Board created",
            lambda snapshot: transitions.add_board(snapshot, title),
            activate=True,
        )

    def connect_repository(self, board_id: str, repo_identifier: str) -> MutationResult:
        """Set or replace the repository linked to a board.

        Args:
            board_id: The board's unique ID
            repo_identifier: Repository URL or "owner/repo", must not be blank
        """
        return self._mutate(
            "connect_repository",
            "GitHub repository connected",
            lambda snapshot: transitions.set_repository(snapshot, board_id, repo_identifier),
        )

    # --- List Operations ---

    def create_list(self, board_id: str, title: str) -> MutationResult:
        """Append an empty list to a board."""
        return self._mutate(
            "create_list",
            "List created",
            lambda snapshot: transitions.add_list(snapshot, board_id, title),
        )

    # --- Task Operations ---

    def create_task(
        self,
        board_id: str,
        list_id: str,
        draft: TaskDraft | Mapping[str, Any],
    ) -> MutationResult:
        """Append a new task to a list.

        Args:
            board_id: The board's unique ID
            list_id: The list's unique ID
            draft: Task fields; title is required, the rest have defaults

        Returns:
            Result whose entity_id is the new task id
        """
        return self._mutate(
            "create_task",
            "Task created",
            lambda snapshot: transitions.add_task(
                snapshot, board_id, list_id, _coerce(TaskDraft, draft)
            ),
        )

    def update_task(
        self,
        board_id: str,
        list_id: str,
        task_id: str,
        update: TaskUpdate | Mapping[str, Any],
    ) -> MutationResult:
        """Merge a partial update into a task.

        Fields absent from ``update`` are kept. ``id`` and ``createdAt`` in
        the payload are ignored.
        """
        return self._mutate(
            "update_task",
            "Task updated",
            lambda snapshot: transitions.update_task(
                snapshot, board_id, list_id, task_id, _coerce(TaskUpdate, update)
            ),
        )

    def move_task(
        self,
        source_board_id: str,
        source_list_id: str,
        task_id: str,
        dest_board_id: str,
        dest_list_id: str,
    ) -> MutationResult:
        """Move a task to the end of another list, possibly on another board.

        A task missing from the source list, or a move into the same list,
        changes nothing.
        """
        return self._mutate(
            "move_task",
            "Task moved",
            lambda snapshot: transitions.move_task(
                snapshot, source_board_id, source_list_id, task_id, dest_board_id, dest_list_id
            ),
        )

    def apply_relocation(self, intent: RelocationIntent) -> MutationResult:
        """Apply a drag-and-drop relocation."""
        return self.move_task(
            intent.source_board_id,
            intent.source_list_id,
            intent.task_id,
            intent.dest_board_id,
            intent.dest_list_id,
        )

    # --- Change notification ---

    def subscribe(self, listener: ChangeListener) -> str:
        """Call ``listener(store)`` after every committed change.

        Returns:
            Token for unsubscribe()
        """
        token = str(uuid.uuid4())
        self._listeners[token] = listener
        return token

    def unsubscribe(self, token: str) -> None:
        self._listeners.pop(token, None)

    # --- Internals ---

    def _mutate(
        self,
        operation: str,
        success_message: str,
        transition: Transition,
        activate: bool = False,
    ) -> MutationResult:
        with self._lock:
            user_id = self._user_id
            if user_id is None:
                logger.warning("%s rejected: no user bound", operation)
                return MutationResult.rejected(RejectionReason.NO_SESSION, "No user session")

            try:
                snapshot, entity = transition(self._snapshot)
            except ValidationRejectedError as e:
                logger.info("%s rejected: %s", operation, e)
                return MutationResult.rejected(RejectionReason.VALIDATION_REJECTED, str(e))
            except ReferenceNotFoundError as e:
                logger.warning("%s rejected: %s", operation, e)
                return MutationResult.rejected(RejectionReason.REFERENCE_NOT_FOUND, str(e))
            except NoChangeError as e:
                logger.debug("%s skipped: %s", operation, e)
                return MutationResult.rejected(RejectionReason.NO_CHANGE, str(e))

            self._snapshot = snapshot
            if activate:
                self._active_board_id = entity.id
            persisted = self._persist(user_id)
            logger.info("%s applied to %s for user %s", operation, entity.id, user_id)
            self._notify()
            return MutationResult(
                ok=True,
                message=success_message,
                entity_id=entity.id,
                persisted=persisted,
            )

    def _persist(self, user_id: str) -> bool:
        if self._save_queue is not None:
            try:
                self._save_queue.submit(user_id, self._snapshot)
            except SaveQueueClosedError as e:
                logger.error("Snapshot for user %s not queued: %s", user_id, e)
                return False
            return True

        saved = self._adapter.save(user_id, self._snapshot)
        if not saved:
            logger.error("Snapshot for user %s not persisted; keeping in-memory change", user_id)
        return saved

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener(self)
            except Exception:
                logger.exception("Change listener failed")
