"""Custom exceptions for the Board State Store.

Raised by the snapshot transitions and converted into MutationResult
failures by BoardStore; they never escape a public store operation.
"""


class BoardStoreError(Exception):
    """Base exception for Board State Store errors."""


class ValidationRejectedError(BoardStoreError):
    """A required field is blank or a value is not allowed."""


class ReferenceNotFoundError(BoardStoreError):
    """An identifier does not resolve in the current snapshot."""


class BoardNotFoundError(ReferenceNotFoundError):
    """Board with given ID does not exist."""


class ListNotFoundError(ReferenceNotFoundError):
    """List with given ID does not exist on the board."""


class TaskNotFoundError(ReferenceNotFoundError):
    """Task with given ID does not exist in the list."""


class NoChangeError(BoardStoreError):
    """The requested transition would leave the snapshot as it is."""
