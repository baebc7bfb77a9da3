"""Payload materialization for file records.

For each file record:
1. Look up ``dropbox-file-<id>`` in the cache; a hit reuses the stored
   payload and touches it, with no network call.
2. On a miss, request a temporary link, download it through the resource
   factory and cache the resulting reference.
3. Any failure leaves the record without a payload; it is still emitted.

A cached reference whose file is gone from disk counts as a miss.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import PurePosixPath

import aiofiles.os
from pydantic import ValidationError

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.record import FILE_RECORD_TYPES, AnyRecord, FileRecord, PayloadRef
from dropbox_source.services.collaborators import (
    KeyValueCache,
    LivenessSink,
    RemoteStorage,
    ResourceFactory,
)

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "dropbox-file-"

DEFAULT_MAX_CONCURRENT = 8


def cache_key(remote_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{remote_id}"


def split_name(name: str) -> tuple[str, str]:
    """Split a file name into base name and dot-prefixed extension."""
    extension = PurePosixPath(name).suffix
    base_name = name[: -len(extension)] if extension else name
    return base_name, extension


class PayloadMaterializer:
    """Attaches local payload references to file records."""

    def __init__(
        self,
        storage: RemoteStorage,
        cache: KeyValueCache,
        factory: ResourceFactory,
        liveness: LivenessSink,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.storage = storage
        self.cache = cache
        self.factory = factory
        self.liveness = liveness
        self.max_concurrent = max_concurrent

    async def materialize(self, record: AnyRecord) -> AnyRecord:
        """Return ``record`` with ``local_file`` set when a payload is available."""
        if not isinstance(record, FileRecord) or record.type not in FILE_RECORD_TYPES:
            return record

        key = cache_key(record.id)
        ref = await self._cached_ref(key)
        if ref is not None:
            self.liveness.touch(ref)
            logger.debug("cache_hit", record_id=record.id, resource_id=ref.id)
            return record.model_copy(update={"local_file": ref})

        try:
            link = await self.storage.get_temporary_link(record.path)
            base_name, extension = split_name(record.name)
            ref = await self.factory.create_from_remote(link.link, extension, base_name)
        except Exception as e:
            logger.error(
                "remote_file_failed",
                record_id=record.id,
                path=record.path,
                error_type=type(e).__name__,
                error=str(e),
            )
            return record

        try:
            await self.cache.set(key, ref.model_dump(mode="json"))
        except Exception as e:
            logger.warning("cache_store_failed", key=key, error=str(e))

        return record.model_copy(update={"local_file": ref})

    async def _cached_ref(self, key: str) -> PayloadRef | None:
        """Cached payload reference, or None on a miss or unreadable entry."""
        try:
            cached = await self.cache.get(key)
        except Exception as e:
            logger.warning("cache_lookup_failed", key=key, error=str(e))
            return None
        if cached is None:
            return None
        try:
            ref = PayloadRef.model_validate(cached)
        except ValidationError:
            logger.warning("cache_entry_invalid", key=key)
            return None
        if not await aiofiles.os.path.exists(ref.path):
            logger.info("cached_payload_missing", key=key, path=ref.path)
            return None
        return ref

    async def materialize_all(self, records: Sequence[AnyRecord]) -> list[AnyRecord]:
        """Materialize every record concurrently; order is preserved.

        At most ``max_concurrent`` records are in flight at once. Returns
        once every attempt has settled.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def _materialize_with_sem(record: AnyRecord) -> AnyRecord:
            async with semaphore:
                return await self.materialize(record)

        results = await asyncio.gather(
            *(_materialize_with_sem(record) for record in records),
            return_exceptions=True,
        )

        materialized: list[AnyRecord] = []
        for record, result in zip(records, results):
            if isinstance(result, BaseException):
                logger.error(
                    "materialize_crashed",
                    record_id=record.id,
                    error_type=type(result).__name__,
                    error=str(result),
                )
                materialized.append(record)
            else:
                materialized.append(result)

        logger.info(
            "payloads_materialized",
            records=len(materialized),
            with_payload=sum(1 for r in materialized if getattr(r, "local_file", None) is not None),
        )
        return materialized
