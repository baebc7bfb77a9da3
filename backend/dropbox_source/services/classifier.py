"""Entry classification: files vs. folders and file type by extension."""

from __future__ import annotations

from collections.abc import Iterable

from dropbox_source.schemas.entry import RemoteEntry
from dropbox_source.schemas.record import RecordType

MARKDOWN_EXTENSIONS = {".md"}

# Every listed image extension maps to an image record
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}


def extract_files(entries: Iterable[RemoteEntry], extensions: Iterable[str]) -> list[RemoteEntry]:
    """Keep file entries whose extension is in the allow-list.

    Matching is case-sensitive: ``photo.JPG`` is not allowed by ``.jpg``.
    """
    allowed = set(extensions)
    return [entry for entry in entries if entry.is_file and entry.extension in allowed]


def extract_folders(entries: Iterable[RemoteEntry]) -> list[RemoteEntry]:
    """Keep folder entries."""
    return [entry for entry in entries if entry.is_folder]


def classify_type(entry: RemoteEntry, create_folder_nodes: bool) -> RecordType:
    """Map a file entry to its record type.

    Without folder records nothing links to typed files, so every file is
    a default record.
    """
    if not create_folder_nodes:
        return RecordType.DEFAULT

    extension = entry.extension
    if extension in MARKDOWN_EXTENSIONS:
        return RecordType.MARKDOWN
    if extension in IMAGE_EXTENSIONS:
        return RecordType.IMAGE
    return RecordType.DEFAULT
