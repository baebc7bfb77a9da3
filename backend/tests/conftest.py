"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from dropbox_source.db.base import Base
from dropbox_source.db.models import CacheEntry  # noqa: F401
from dropbox_source.schemas.entry import (
    FolderMetadata,
    ListFolderResult,
    RemoteEntry,
    TemporaryLink,
)
from dropbox_source.schemas.record import PayloadRef
from dropbox_source.services.cache import MemoryCache
from dropbox_source.services.remote_file import ResourceTracker


class FakeStorage:
    """In-memory stand-in for the Dropbox API."""

    def __init__(self, entries: list[RemoteEntry] | None = None, page_size: int | None = None):
        self.entries = list(entries or [])
        self.page_size = page_size
        self.folder_ids: dict[str, str] = {}
        self.fail_listing: Exception | None = None
        self.fail_links: set[str] = set()
        self.listed: list[tuple[str, bool]] = []
        self.link_calls: list[str] = []

    def _page(self, offset: int) -> ListFolderResult:
        size = self.page_size or len(self.entries) or 1
        chunk = self.entries[offset:offset + size]
        has_more = offset + size < len(self.entries)
        return ListFolderResult(
            entries=chunk,
            cursor=str(offset + size) if has_more else None,
            has_more=has_more,
        )

    async def get_metadata(self, path: str) -> FolderMetadata:
        if self.fail_listing is not None:
            raise self.fail_listing
        return FolderMetadata(id=self.folder_ids.get(path, f"id:{path}"), name=path.rsplit("/", 1)[-1])

    async def list_folder(self, path: str, recursive: bool) -> ListFolderResult:
        if self.fail_listing is not None:
            raise self.fail_listing
        self.listed.append((path, recursive))
        return self._page(0)

    async def list_folder_continue(self, cursor: str) -> ListFolderResult:
        return self._page(int(cursor))

    async def get_temporary_link(self, path: str) -> TemporaryLink:
        self.link_calls.append(path)
        if path in self.fail_links:
            raise RuntimeError(f"no link for {path}")
        return TemporaryLink(link=f"https://dl.example.test{path}")


class FakeResourceFactory:
    """Records downloads and writes small payload files under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.calls: list[tuple[str, str, str]] = []
        self.fail_names: set[str] = set()

    async def create_from_remote(self, url: str, extension: str, base_name: str) -> PayloadRef:
        self.calls.append((url, extension, base_name))
        if base_name in self.fail_names:
            raise OSError(f"disk full writing {base_name}")
        path = self.root / f"{base_name}{extension}"
        path.write_bytes(b"abc")
        return PayloadRef(
            id=f"payload-{base_name}",
            path=str(path),
            name=base_name,
            extension=extension,
            size=3,
            sha256="0" * 64,
        )


@pytest.fixture
def file_entry() -> Callable[..., RemoteEntry]:
    """Factory for file entries."""

    def _make(id: str, path: str, client_modified: str | None = "2024-05-01T10:00:00Z") -> RemoteEntry:
        return RemoteEntry(
            tag="file",
            id=id,
            name=path.rsplit("/", 1)[-1],
            path_display=path,
            client_modified=client_modified,
        )

    return _make


@pytest.fixture
def folder_entry() -> Callable[..., RemoteEntry]:
    """Factory for folder entries."""

    def _make(id: str, path: str) -> RemoteEntry:
        return RemoteEntry(tag="folder", id=id, name=path.rsplit("/", 1)[-1], path_display=path)

    return _make


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def factory(tmp_path) -> FakeResourceFactory:
    root = tmp_path / "payloads"
    root.mkdir()
    return FakeResourceFactory(root)


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def tracker() -> ResourceTracker:
    return ResourceTracker()


@pytest.fixture
async def db_engine():
    """Create an in-memory test database engine."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory for the test database."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
