"""Custom exceptions for the persistence layer."""


class PersistenceError(Exception):
    """Base exception for durable storage errors."""


class SnapshotDecodeError(PersistenceError):
    """Stored payload is not a valid snapshot."""


class SaveQueueClosedError(PersistenceError):
    """Save submitted after the queue was closed."""
