"""Board State Store - Boards, lists and tasks for one user session."""

from taskboard.board_store.models import (
    DEFAULT_BOARD_TITLE,
    DEFAULT_LIST_TITLES,
    Board,
    BoardList,
    Priority,
    RelocationIntent,
    Snapshot,
    Task,
    TaskDraft,
    TaskStatus,
    TaskUpdate,
    generate_id,
)
from taskboard.board_store.exceptions import (
    BoardNotFoundError,
    BoardStoreError,
    ListNotFoundError,
    NoChangeError,
    ReferenceNotFoundError,
    TaskNotFoundError,
    ValidationRejectedError,
)
from taskboard.board_store.results import MutationResult, RejectionReason
from taskboard.board_store.store import BoardStore

__all__ = [
    "DEFAULT_BOARD_TITLE",
    "DEFAULT_LIST_TITLES",
    "Board",
    "BoardList",
    "BoardNotFoundError",
    "BoardStore",
    "BoardStoreError",
    "ListNotFoundError",
    "MutationResult",
    "NoChangeError",
    "Priority",
    "ReferenceNotFoundError",
    "RejectionReason",
    "RelocationIntent",
    "Snapshot",
    "Task",
    "TaskDraft",
    "TaskNotFoundError",
    "TaskStatus",
    "TaskUpdate",
    "ValidationRejectedError",
    "generate_id",
]
