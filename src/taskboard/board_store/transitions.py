"""Pure snapshot transitions.

Each function takes the current Snapshot and returns a new one (plus the
entity it created or touched). Nothing is modified in place, so a raised
exception means the caller still holds the untouched previous snapshot.
"""

from __future__ import annotations

from taskboard.board_store.exceptions import (
    BoardNotFoundError,
    ListNotFoundError,
    NoChangeError,
    TaskNotFoundError,
    ValidationRejectedError,
)
from taskboard.board_store.models import (
    Board,
    BoardList,
    Snapshot,
    Task,
    TaskDraft,
    TaskUpdate,
    new_board,
    new_list,
    new_task,
)


def require_text(value: str | None, field_name: str) -> str:
    """Return ``value`` stripped, or raise if nothing is left."""
    text = value.strip() if value else ""
    if not text:
        raise ValidationRejectedError(f"{field_name} is required")
    return text


def get_board(snapshot: Snapshot, board_id: str) -> Board:
    board = snapshot.find_board(board_id)
    if board is None:
        raise BoardNotFoundError(f"Board with id '{board_id}' not found")
    return board


def get_list(board: Board, list_id: str) -> BoardList:
    board_list = board.find_list(list_id)
    if board_list is None:
        raise ListNotFoundError(f"List with id '{list_id}' not found on board '{board.id}'")
    return board_list


def _replace_board(snapshot: Snapshot, board: Board) -> Snapshot:
    boards = tuple(board if existing.id == board.id else existing for existing in snapshot.boards)
    return snapshot.model_copy(update={"boards": boards})


def _replace_list(board: Board, board_list: BoardList) -> Board:
    lists = tuple(board_list if existing.id == board_list.id else existing for existing in board.lists)
    return board.model_copy(update={"lists": lists})


def _with_tasks(board_list: BoardList, tasks: tuple[Task, ...]) -> BoardList:
    return board_list.model_copy(update={"tasks": tasks})


# --- Boards ---


def add_board(snapshot: Snapshot, title: str) -> tuple[Snapshot, Board]:
    board = new_board(require_text(title, "Board title"))
    return snapshot.model_copy(update={"boards": (*snapshot.boards, board)}), board


def set_repository(snapshot: Snapshot, board_id: str, repo: str) -> tuple[Snapshot, Board]:
    repo = require_text(repo, "Repository")
    board = get_board(snapshot, board_id).model_copy(update={"github_repo": repo})
    return _replace_board(snapshot, board), board


# --- Lists ---


def add_list(snapshot: Snapshot, board_id: str, title: str) -> tuple[Snapshot, BoardList]:
    title = require_text(title, "List title")
    board = get_board(snapshot, board_id)
    board_list = new_list(title)
    board = board.model_copy(update={"lists": (*board.lists, board_list)})
    return _replace_board(snapshot, board), board_list


# --- Tasks ---


def add_task(
    snapshot: Snapshot, board_id: str, list_id: str, draft: TaskDraft
) -> tuple[Snapshot, Task]:
    require_text(draft.title, "Task title")
    board = get_board(snapshot, board_id)
    board_list = get_list(board, list_id)

    task = new_task(draft)
    board_list = _with_tasks(board_list, (*board_list.tasks, task))
    return _replace_board(snapshot, _replace_list(board, board_list)), task


def update_task(
    snapshot: Snapshot,
    board_id: str,
    list_id: str,
    task_id: str,
    update: TaskUpdate,
) -> tuple[Snapshot, Task]:
    """Merge the explicitly set fields of ``update`` into one task.

    ``id`` and ``created_at`` are never part of a TaskUpdate, so they
    cannot change here.
    """
    board = get_board(snapshot, board_id)
    board_list = get_list(board, list_id)
    task = board_list.find_task(task_id)
    if task is None:
        raise TaskNotFoundError(f"Task with id '{task_id}' not found in list '{list_id}'")

    changes = update.changes()
    if not changes:
        raise NoChangeError("Nothing to update")
    if "title" in changes:
        changes["title"] = require_text(changes["title"], "Task title")

    updated = task.model_copy(update=changes)
    tasks = tuple(updated if existing.id == task_id else existing for existing in board_list.tasks)
    board_list = _with_tasks(board_list, tasks)
    return _replace_board(snapshot, _replace_list(board, board_list)), updated


def move_task(
    snapshot: Snapshot,
    source_board_id: str,
    source_list_id: str,
    task_id: str,
    dest_board_id: str,
    dest_list_id: str,
) -> tuple[Snapshot, Task]:
    """Remove a task from its list and append it to another, in one step.

    Lists are matched by id only. Every reference is resolved before the
    new snapshot is built, so an unknown destination never drops the task.
    """
    if source_board_id == dest_board_id and source_list_id == dest_list_id:
        raise NoChangeError("Task is already in that list")

    source_board = get_board(snapshot, source_board_id)
    source_list = get_list(source_board, source_list_id)
    task = source_list.find_task(task_id)
    if task is None:
        raise TaskNotFoundError(f"Task with id '{task_id}' not found in list '{source_list_id}'")
    get_list(get_board(snapshot, dest_board_id), dest_list_id)

    remaining = tuple(existing for existing in source_list.tasks if existing.id != task_id)
    snapshot = _replace_board(
        snapshot, _replace_list(source_board, _with_tasks(source_list, remaining))
    )

    # Re-read the destination so a same-board move sees the removal above.
    dest_board = get_board(snapshot, dest_board_id)
    dest_list = get_list(dest_board, dest_list_id)
    dest_list = _with_tasks(dest_list, (*dest_list.tasks, task))
    return _replace_board(snapshot, _replace_list(dest_board, dest_list)), task
