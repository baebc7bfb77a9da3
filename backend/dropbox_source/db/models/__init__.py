"""Database models for dropbox-source."""

from dropbox_source.db.models.cache_entry import CacheEntry

__all__ = [
    "CacheEntry",
]
