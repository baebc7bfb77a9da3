"""Key/value caches for materialized payload references."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dropbox_source.core.logging import get_logger
from dropbox_source.db.models import CacheEntry

logger = get_logger(__name__)


class MemoryCache:
    """In-memory key/value cache.

    Safe for concurrent use from one event loop. Nothing survives the
    process; ``SqlCache`` is the persistent variant.
    """

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            return self._cache.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            self._cache[key] = value
            logger.debug("cache_set", key=key)


class SqlCache:
    """Key/value cache persisted in the ``cache_entries`` table.

    Each call uses its own session, so lookups and writes for distinct
    keys can run concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def get(self, key: str) -> Any | None:
        async with self.session_maker() as session:
            entry = await session.get(CacheEntry, key)
            if entry is None:
                return None
            return json.loads(entry.value)

    async def set(self, key: str, value: Any) -> None:
        async with self.session_maker() as session:
            try:
                await session.merge(CacheEntry(key=key, value=json.dumps(value)))
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        logger.debug("cache_set", key=key)
