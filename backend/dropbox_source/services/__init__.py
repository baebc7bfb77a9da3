"""Business logic services for dropbox-source."""

from dropbox_source.services.cache import MemoryCache, SqlCache
from dropbox_source.services.dropbox_client import DropboxClient, DropboxError
from dropbox_source.services.materializer import PayloadMaterializer
from dropbox_source.services.pipeline import DropboxSource
from dropbox_source.services.remote_file import RemoteFileError, RemoteFileStore, ResourceTracker
from dropbox_source.services.sinks import CollectingSink, JsonLinesSink

__all__ = [
    "CollectingSink",
    "DropboxClient",
    "DropboxError",
    "DropboxSource",
    "JsonLinesSink",
    "MemoryCache",
    "PayloadMaterializer",
    "RemoteFileError",
    "RemoteFileStore",
    "ResourceTracker",
    "SqlCache",
]
