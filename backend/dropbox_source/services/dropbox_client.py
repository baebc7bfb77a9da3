"""Dropbox HTTP API v2 client.

Provides:
- Path resolution via ``files/get_metadata``
- Folder listing with cursor pagination
- Short-lived download links via ``files/get_temporary_link``

The client performs no retries. Every request is bounded by the
configured timeout, and failures surface as ``DropboxError`` subclasses.
"""

from __future__ import annotations

from typing import Any

import httpx

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.entry import FolderMetadata, ListFolderResult, TemporaryLink

logger = get_logger(__name__)

DEFAULT_API_BASE = "https://api.dropboxapi.com/2"


class DropboxError(Exception):
    """Base exception for Dropbox errors."""

    pass


class DropboxAuthError(DropboxError):
    """Raised when the access token is missing, invalid or expired."""

    pass


class DropboxNotFoundError(DropboxError):
    """Raised when a path does not exist."""

    pass


class DropboxRateLimitError(DropboxError):
    """Raised when rate limited by the Dropbox API."""

    def __init__(self, message: str = "Dropbox API rate limit exceeded", retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after  # Seconds to wait before retry


class DropboxApiError(DropboxError):
    """Raised for any other error response."""

    def __init__(self, message: str, status_code: int | None = None, error_summary: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_summary = error_summary


class DropboxClient:
    """Async client for the Dropbox RPC endpoints used by the source."""

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            access_token: OAuth2 bearer token.
            base_url: RPC endpoint base URL.
            timeout: Per-request timeout in seconds.
            transport: Optional transport, used by tests.
        """
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "DropboxClient":
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
                headers={"Authorization": f"Bearer {self.access_token}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _rpc(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body to an RPC endpoint and decode the response.

        Raises:
            DropboxAuthError: On 401.
            DropboxNotFoundError: On a 409 whose summary reports not_found.
            DropboxRateLimitError: On 429.
            DropboxApiError: On any other error status.
            DropboxError: On transport failure.
        """
        if not self.access_token:
            raise DropboxAuthError("Dropbox access token is not configured")

        client = await self._get_client()
        url = f"{self.base_url}/{endpoint}"
        logger.debug("dropbox_request", endpoint=endpoint)

        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise DropboxError(f"HTTP error calling {endpoint}: {type(e).__name__}: {e}") from e

        if response.status_code == 200:
            return response.json()

        if response.status_code == 401:
            raise DropboxAuthError(f"Dropbox rejected the access token ({endpoint})")

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise DropboxRateLimitError(
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )

        error_summary = self._error_summary(response)
        if response.status_code == 409 and error_summary and "not_found" in error_summary:
            raise DropboxNotFoundError(f"{endpoint}: {error_summary}")

        raise DropboxApiError(
            f"Dropbox API returned {response.status_code} for {endpoint}: {error_summary or response.text[:200]}",
            status_code=response.status_code,
            error_summary=error_summary,
        )

    @staticmethod
    def _error_summary(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("error_summary")
        return None

    async def get_metadata(self, path: str) -> FolderMetadata:
        """Get metadata for a path."""
        data = await self._rpc("files/get_metadata", {"path": path})
        return FolderMetadata.model_validate(data)

    async def list_folder(self, path: str, recursive: bool) -> ListFolderResult:
        """List the first page of a folder.

        Args:
            path: Folder path or ``id:`` reference; ``""`` is the app root.
            recursive: Whether to include every descendant.
        """
        data = await self._rpc("files/list_folder", {"path": path, "recursive": recursive})
        return ListFolderResult.model_validate(data)

    async def list_folder_continue(self, cursor: str) -> ListFolderResult:
        """Fetch the next page of a listing."""
        data = await self._rpc("files/list_folder/continue", {"cursor": cursor})
        return ListFolderResult.model_validate(data)

    async def get_temporary_link(self, path: str) -> TemporaryLink:
        """Get a download link valid for four hours."""
        data = await self._rpc("files/get_temporary_link", {"path": path})
        return TemporaryLink.model_validate(data)
