"""Record construction from classified entries."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.entry import RemoteEntry
from dropbox_source.schemas.options import SourceOptions
from dropbox_source.schemas.record import (
    ROOT_FOLDER_ID,
    ROOT_FOLDER_NAME,
    FileRecord,
    FolderRecord,
)
from dropbox_source.services.classifier import classify_type, extract_files, extract_folders

logger = get_logger(__name__)


def compute_content_digest(fields: Mapping[str, object]) -> str:
    """Hash the semantic fields of a record.

    Keys are sorted so the digest does not depend on insertion order.

    Returns:
        64-character lowercase hex string of the SHA-256 hash.
    """
    serialized = json.dumps(dict(fields), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def build_file_record(entry: RemoteEntry, options: SourceOptions) -> FileRecord:
    fields = {
        "name": entry.name,
        "path": entry.path_display,
        "lastModified": entry.client_modified,
    }
    return FileRecord(
        id=entry.id,
        type=classify_type(entry, options.create_folder_nodes),
        content_digest=compute_content_digest(fields),
        name=entry.name,
        path=entry.path_display,
        last_modified=entry.client_modified,
    )


def build_folder_record(entry: RemoteEntry) -> FolderRecord:
    fields = {"name": entry.name, "path": entry.path_display}
    return FolderRecord(
        id=entry.id,
        content_digest=compute_content_digest(fields),
        name=entry.name,
        path=entry.path_display,
    )


def build_root_folder() -> FolderRecord:
    """The folder record for the app's home directory."""
    fields = {"name": ROOT_FOLDER_NAME, "path": ""}
    return FolderRecord(
        id=ROOT_FOLDER_ID,
        content_digest=compute_content_digest(fields),
        name=ROOT_FOLDER_NAME,
        path="",
    )


def build_file_records(entries: Iterable[RemoteEntry], options: SourceOptions) -> list[FileRecord]:
    return [build_file_record(entry, options) for entry in extract_files(entries, options.extensions)]


def build_folder_records(entries: Iterable[RemoteEntry]) -> list[FolderRecord]:
    """Folder records for every listed folder plus the root folder."""
    folders = [build_folder_record(entry) for entry in extract_folders(entries)]
    folders.append(build_root_folder())
    return folders


def build_records(
    entries: Iterable[RemoteEntry], options: SourceOptions
) -> tuple[list[FileRecord], list[FolderRecord]]:
    """Build unlinked file and folder records.

    Folder records are only built when ``create_folder_nodes`` is set.
    """
    entries = list(entries)
    files = build_file_records(entries, options)
    folders = build_folder_records(entries) if options.create_folder_nodes else []

    logger.info("records_built", files=len(files), folders=len(folders))
    return files, folders
