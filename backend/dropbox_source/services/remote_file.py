"""Local storage for downloaded Dropbox payloads.

Downloads are streamed to a staging file while being hashed, then moved to
``<root>/<sha[:2]>/<sha><ext>``. Identical content is stored once.
"""

from __future__ import annotations

import hashlib
import uuid
from collections.abc import Callable
from pathlib import Path

import aiofiles
import aiofiles.os
import httpx

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.record import PayloadRef
from dropbox_source.utils.ids import create_node_id

logger = get_logger(__name__)

STAGING_DIRNAME = ".staging"


class RemoteFileError(Exception):
    """Error while materializing a remote file."""

    pass


class RemoteFileStore:
    """Creates local resources from download URLs."""

    def __init__(
        self,
        root: Path,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        id_factory: Callable[[str], str] = create_node_id,
    ):
        """Initialize the store.

        Args:
            root: Directory payloads are stored under.
            timeout: Per-request timeout in seconds.
            transport: Optional transport, used by tests.
            id_factory: Stable id generator for payload references.
        """
        self.root = root
        self.timeout = timeout
        self.id_factory = id_factory
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RemoteFileStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                # Requests queued for a pooled connection wait without a deadline
                timeout=httpx.Timeout(self.timeout, pool=None),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def payload_path(self, sha256: str, extension: str) -> Path:
        return self.root / sha256[:2] / f"{sha256}{extension}"

    async def create_from_remote(self, url: str, extension: str, base_name: str) -> PayloadRef:
        """Download ``url`` and store it content-addressed.

        Args:
            url: Download URL.
            extension: Dot-prefixed extension for the stored file.
            base_name: File name without extension.

        Returns:
            PayloadRef for the stored file.

        Raises:
            RemoteFileError: If the download or the write fails.
        """
        staging_dir = self.root / STAGING_DIRNAME
        staging_file = staging_dir / f"{uuid.uuid4().hex}{extension}"

        try:
            await aiofiles.os.makedirs(staging_dir, exist_ok=True)
            sha256, size = await self._download(url, staging_file)
            dest = self.payload_path(sha256, extension)
            await aiofiles.os.makedirs(dest.parent, exist_ok=True)
            if await aiofiles.os.path.exists(dest):
                await aiofiles.os.remove(staging_file)
                logger.debug("remote_file_deduplicated", sha256=sha256, name=base_name)
            else:
                await aiofiles.os.replace(staging_file, dest)
        except httpx.HTTPError as e:
            await self._discard(staging_file)
            raise RemoteFileError(
                f"Download failed for {base_name}{extension}: {type(e).__name__}: {e}"
            ) from e
        except OSError as e:
            await self._discard(staging_file)
            raise RemoteFileError(
                f"Could not store {base_name}{extension}: {type(e).__name__}: {e}"
            ) from e
        except RemoteFileError:
            await self._discard(staging_file)
            raise

        ref = PayloadRef(
            id=self.id_factory(f"dropbox-payload-{sha256}{extension}"),
            path=str(dest),
            name=base_name,
            extension=extension,
            size=size,
            sha256=sha256,
        )
        logger.info(
            "remote_file_created",
            name=f"{base_name}{extension}",
            size=size,
            sha256=sha256,
        )
        return ref

    async def _download(self, url: str, dest: Path) -> tuple[str, int]:
        """Stream ``url`` into ``dest``, hashing as it goes."""
        client = await self._get_client()
        digest = hashlib.sha256()
        size = 0

        async with client.stream("GET", url) as response:
            if response.status_code != 200:
                raise RemoteFileError(f"Download returned HTTP {response.status_code}")
            async with aiofiles.open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    digest.update(chunk)
                    size += len(chunk)
                    await f.write(chunk)

        return digest.hexdigest(), size

    async def _discard(self, path: Path) -> None:
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)


class ResourceTracker:
    """Collects payloads from earlier runs that the current run reused.

    Together with the payloads created this run, ``live_ids`` is what a
    host garbage-collection pass must keep.
    """

    def __init__(self) -> None:
        self._touched: dict[str, PayloadRef] = {}

    def touch(self, ref: PayloadRef) -> None:
        self._touched[ref.id] = ref
        logger.debug("resource_touched", resource_id=ref.id, path=ref.path)

    @property
    def live_ids(self) -> set[str]:
        return set(self._touched)

    def __len__(self) -> int:
        return len(self._touched)
