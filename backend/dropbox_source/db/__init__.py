"""Database package for dropbox-source."""

from dropbox_source.db.base import Base
from dropbox_source.db.session import (
    create_engine,
    create_session_maker,
    get_database_url,
    init_db,
)

__all__ = [
    "Base",
    "create_engine",
    "create_session_maker",
    "get_database_url",
    "init_db",
]
