"""Pydantic models for the board state store.

All entities are frozen. A mutation builds new objects with ``model_copy``
so two snapshots never share a mutable substructure. Field names are
snake_case in Python and camelCase on the wire (``dueDate``,
``createdAt``, ``githubRepo``).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_BOARD_TITLE = "My First Board"
DEFAULT_LIST_TITLES = ("To Do", "In Progress", "Done")


class Priority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(StrEnum):
    """Task status."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


def generate_id() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class _Entity(_WireModel):
    model_config = ConfigDict(frozen=True)


def _blank_date_to_none(value: Any) -> Any:
    # Date inputs that were cleared arrive as "".
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalDate = Annotated[date | None, BeforeValidator(_blank_date_to_none)]


class Task(_Entity):
    """A unit of work. Owned by exactly one list."""

    id: str
    title: str
    description: str = ""
    due_date: OptionalDate = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    created_at: datetime


class BoardList(_Entity):
    """Ordered column of tasks within a board."""

    id: str
    title: str
    tasks: tuple[Task, ...] = ()

    def find_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)


class Board(_Entity):
    """Top-level container of lists."""

    id: str
    title: str
    lists: tuple[BoardList, ...] = ()
    github_repo: str | None = None

    def find_list(self, list_id: str) -> BoardList | None:
        return next((lst for lst in self.lists if lst.id == list_id), None)


class Snapshot(_Entity):
    """All boards of one user at a point in time."""

    boards: tuple[Board, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_board_array(cls, data: Any) -> Any:
        # Older payloads stored the board array without the wrapping object.
        if isinstance(data, list):
            return {"boards": data}
        return data

    def find_board(self, board_id: str) -> Board | None:
        return next((board for board in self.boards if board.id == board_id), None)

    @property
    def task_count(self) -> int:
        return sum(len(lst.tasks) for board in self.boards for lst in board.lists)


class TaskDraft(_WireModel):
    """Fields supplied when creating a task. Defaults match a blank task form."""

    title: str
    description: str = ""
    due_date: OptionalDate = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO


class TaskUpdate(_WireModel):
    """Partial update for a task. Only explicitly provided fields apply.

    ``id`` and ``createdAt`` are not fields here, so a payload carrying
    them (e.g. a whole edited task) has them silently dropped.
    """

    title: str | None = None
    description: str | None = None
    due_date: OptionalDate = None
    priority: Priority | None = None
    status: TaskStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Explicitly set fields. ``due_date=None`` clears; other Nones are skipped."""
        provided = self.model_dump(exclude_unset=True)
        return {
            name: value
            for name, value in provided.items()
            if value is not None or name == "due_date"
        }


@dataclass(frozen=True)
class RelocationIntent:
    """Drag-and-drop payload: move a task from one list to another."""

    task_id: str
    source_board_id: str
    source_list_id: str
    dest_board_id: str
    dest_list_id: str


def new_list(title: str) -> BoardList:
    return BoardList(id=generate_id(), title=title)


def new_board(title: str) -> Board:
    """Board with a fresh id and the three default lists."""
    return Board(
        id=generate_id(),
        title=title,
        lists=tuple(new_list(list_title) for list_title in DEFAULT_LIST_TITLES),
    )


def default_board() -> Board:
    """The board every new user starts with."""
    return new_board(DEFAULT_BOARD_TITLE)


def new_task(draft: TaskDraft) -> Task:
    return Task(
        id=generate_id(),
        title=draft.title.strip(),
        description=draft.description,
        due_date=draft.due_date,
        priority=draft.priority,
        status=draft.status,
        created_at=utc_now(),
    )
