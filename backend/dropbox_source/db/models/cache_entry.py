"""Persistent cache entry model."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dropbox_source.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheEntry(Base):
    """Stores cached values as key-value pairs.

    Values are stored as JSON-encoded text. Keys look like
    ``dropbox-file-<remote id>``.
    """

    __tablename__ = "cache_entries"

    # Primary key - the cache key
    key: Mapped[str] = mapped_column(String(255), primary_key=True)

    # JSON-encoded value
    value: Mapped[str] = mapped_column(Text, nullable=False)

    # Timestamps
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
