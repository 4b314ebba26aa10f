"""SQLAlchemy models for the snapshot store."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class StoredSnapshot(Base):
    """One serialized snapshot per storage key (namespace + user id)."""

    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    revision: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    def __init__(self, key: str, payload: str, revision: int = 1, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.key = key
        self.payload = payload
        self.revision = revision

    def __repr__(self) -> str:
        return f"<StoredSnapshot(key={self.key!r}, revision={self.revision!r})>"
