"""Outcome values returned by every BoardStore operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class RejectionReason(StrEnum):
    """Why an operation left the snapshot unchanged."""

    VALIDATION_REJECTED = "validation_rejected"
    REFERENCE_NOT_FOUND = "reference_not_found"
    NO_CHANGE = "no_change"
    NO_SESSION = "no_session"
    STORAGE_UNAVAILABLE = "storage_unavailable"


@dataclass(frozen=True)
class MutationResult:
    """Result of a store operation, mapped to a notification by the caller.

    Attributes:
        ok: True when the operation was applied.
        message: Notification text ("Task created", "Board title is required").
        reason: Set when ok is False.
        entity_id: Id of the created or affected entity, when there is one.
        persisted: False when the durable write for this change failed. The
            in-memory change stands either way. With a write-behind queue,
            True means the save was queued.
    """

    ok: bool
    message: str
    reason: RejectionReason | None = None
    entity_id: str | None = None
    persisted: bool = True

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str, entity_id: str | None = None) -> MutationResult:
        return cls(ok=True, message=message, entity_id=entity_id)

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str) -> MutationResult:
        return cls(ok=False, message=message, reason=reason)
