"""Remote listing of the configured Dropbox folder."""

from __future__ import annotations

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.entry import RemoteEntry
from dropbox_source.schemas.options import SourceOptions
from dropbox_source.services.collaborators import RemoteStorage
from dropbox_source.services.dropbox_client import DropboxRateLimitError

logger = get_logger(__name__)

# Dropbox addresses the app folder root as the empty path
PROVIDER_ROOT = ""


class RemoteLister:
    """Resolves the configured path and lists everything beneath it.

    Listing is fail-open: any provider error is logged and reported as an
    empty listing, so callers treat it exactly like an empty folder.
    """

    def __init__(self, storage: RemoteStorage):
        self.storage = storage

    async def resolve_path(self, path: str) -> str:
        """Resolve a folder path to its id, or the provider root for ``""``."""
        if path == PROVIDER_ROOT:
            return PROVIDER_ROOT
        metadata = await self.storage.get_metadata(path)
        return metadata.id

    async def list_entries(self, folder_id: str, recursive: bool) -> list[RemoteEntry]:
        """List every entry of a folder, following pagination cursors."""
        page = await self.storage.list_folder(folder_id, recursive)
        entries = list(page.entries)
        while page.has_more and page.cursor:
            page = await self.storage.list_folder_continue(page.cursor)
            entries.extend(page.entries)
        return entries

    async def fetch_entries(self, options: SourceOptions) -> list[RemoteEntry]:
        """Resolve and list the configured folder, or ``[]`` on any error."""
        try:
            folder_id = await self.resolve_path(options.path)
            entries = await self.list_entries(folder_id, options.recursive)
        except DropboxRateLimitError as e:
            logger.warning(
                "listing_rate_limited",
                path=options.path,
                retry_after=e.retry_after,
            )
            return []
        except Exception as e:
            logger.warning(
                "listing_failed",
                path=options.path,
                error_type=type(e).__name__,
                error=str(e),
            )
            return []

        logger.info(
            "listing_fetched",
            path=options.path,
            recursive=options.recursive,
            entries=len(entries),
        )
        return entries
