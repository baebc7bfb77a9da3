"""Tests for DropboxClient - request shape, response parsing and error mapping.

All tests run against ``httpx.MockTransport``; no network access is needed.
"""

from __future__ import annotations

import json

import httpx
import pytest

from dropbox_source.services.dropbox_client import (
    DropboxApiError,
    DropboxAuthError,
    DropboxClient,
    DropboxError,
    DropboxNotFoundError,
    DropboxRateLimitError,
)


def _client(handler) -> DropboxClient:
    return DropboxClient(
        "token-123",
        base_url="https://api.example.test/2",
        transport=httpx.MockTransport(handler),
    )


class TestRequests:
    """Tests for request construction and parsing."""

    @pytest.mark.asyncio
    async def test_list_folder(self):
        """Test the list_folder request and entry parsing."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "entries": [
                        {
                            ".tag": "file",
                            "id": "id:1",
                            "name": "a.md",
                            "path_display": "/docs/a.md",
                            "path_lower": "/docs/a.md",
                            "client_modified": "2024-05-01T10:00:00Z",
                            "size": 12,
                        },
                        {".tag": "folder", "id": "id:2", "name": "docs", "path_display": "/docs"},
                    ],
                    "cursor": "c1",
                    "has_more": True,
                },
            )

        async with _client(handler) as client:
            result = await client.list_folder("", True)

        assert seen["url"] == "https://api.example.test/2/files/list_folder"
        assert seen["auth"] == "Bearer token-123"
        assert seen["body"] == {"path": "", "recursive": True}
        assert result.has_more is True
        assert result.cursor == "c1"
        assert [e.tag for e in result.entries] == ["file", "folder"]
        assert result.entries[0].client_modified == "2024-05-01T10:00:00Z"
        assert result.entries[1].client_modified is None

    @pytest.mark.asyncio
    async def test_list_folder_continue(self):
        """Test the continuation endpoint."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/2/files/list_folder/continue"
            assert json.loads(request.content) == {"cursor": "c1"}
            return httpx.Response(200, json={"entries": [], "cursor": "c2", "has_more": False})

        async with _client(handler) as client:
            result = await client.list_folder_continue("c1")

        assert result.entries == []
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_get_metadata(self):
        """Test path resolution metadata."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {"path": "/Photos"}
            return httpx.Response(
                200,
                json={".tag": "folder", "id": "id:photos", "name": "Photos", "path_display": "/Photos"},
            )

        async with _client(handler) as client:
            metadata = await client.get_metadata("/Photos")

        assert metadata.id == "id:photos"

    @pytest.mark.asyncio
    async def test_get_temporary_link(self):
        """Test the temporary link call."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/2/files/get_temporary_link"
            return httpx.Response(
                200,
                json={"link": "https://dl.example.test/abc", "metadata": {"name": "a.md"}},
            )

        async with _client(handler) as client:
            link = await client.get_temporary_link("/a.md")

        assert link.link == "https://dl.example.test/abc"


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_missing_token(self):
        """Test that no request is made without a token."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        client = DropboxClient("", transport=httpx.MockTransport(handler))
        with pytest.raises(DropboxAuthError):
            await client.list_folder("", True)

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        """Test 401 mapping."""
        async with _client(lambda r: httpx.Response(401, text="invalid_access_token")) as client:
            with pytest.raises(DropboxAuthError):
                await client.list_folder("", True)

    @pytest.mark.asyncio
    async def test_not_found(self):
        """Test that a 409 not_found summary maps to DropboxNotFoundError."""
        response = httpx.Response(409, json={"error_summary": "path/not_found/.."})
        async with _client(lambda r: response) as client:
            with pytest.raises(DropboxNotFoundError):
                await client.get_metadata("/missing")

    @pytest.mark.asyncio
    async def test_other_conflict(self):
        """Test that other 409 errors keep their summary."""
        response = httpx.Response(409, json={"error_summary": "path/malformed_path/"})
        async with _client(lambda r: response) as client:
            with pytest.raises(DropboxApiError) as exc_info:
                await client.get_metadata("bad")

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_summary == "path/malformed_path/"

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        """Test 429 mapping with Retry-After."""
        response = httpx.Response(429, headers={"Retry-After": "15"})
        async with _client(lambda r: response) as client:
            with pytest.raises(DropboxRateLimitError) as exc_info:
                await client.list_folder("", True)

        assert exc_info.value.retry_after == 15

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Test that 5xx responses raise DropboxApiError."""
        async with _client(lambda r: httpx.Response(503, text="unavailable")) as client:
            with pytest.raises(DropboxApiError) as exc_info:
                await client.list_folder("", True)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test that transport failures are wrapped and name their cause."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(DropboxError, match="ConnectError"):
                await client.list_folder("", True)
