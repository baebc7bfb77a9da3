"""Interfaces of the collaborators the ingestion pipeline consumes."""

from __future__ import annotations

from typing import Any, Protocol

from dropbox_source.schemas.entry import FolderMetadata, ListFolderResult, TemporaryLink
from dropbox_source.schemas.record import AnyRecord, PayloadRef


class RemoteStorage(Protocol):
    """Listing and link API of the storage provider."""

    async def get_metadata(self, path: str) -> FolderMetadata: ...

    async def list_folder(self, path: str, recursive: bool) -> ListFolderResult: ...

    async def list_folder_continue(self, cursor: str) -> ListFolderResult: ...

    async def get_temporary_link(self, path: str) -> TemporaryLink: ...


class KeyValueCache(Protocol):
    """Persistent key/value store shared across runs."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class ResourceFactory(Protocol):
    """Turns a download URL into a local resource."""

    async def create_from_remote(
        self, url: str, extension: str, base_name: str
    ) -> PayloadRef: ...


class LivenessSink(Protocol):
    """Told about resources from earlier runs that are still referenced."""

    def touch(self, ref: PayloadRef) -> None: ...


class RecordSink(Protocol):
    """Receives finished records."""

    def register(self, record: AnyRecord) -> None: ...
