"""Folder membership linking between folder and file records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from dropbox_source.core.logging import get_logger
from dropbox_source.schemas.options import FolderMatch
from dropbox_source.schemas.record import (
    LINKABLE_TYPES,
    ROOT_FOLDER_NAME,
    AnyRecord,
    FileRecord,
    FolderRecord,
    RecordType,
)

logger = get_logger(__name__)


def parent_folder_path(path: str) -> str:
    """Parent path of a Dropbox path; ``""`` for root-level items.

    >>> parent_folder_path("/docs/guides/a.md")
    '/docs/guides'
    >>> parent_folder_path("/a.md")
    ''
    """
    return path.rpartition("/")[0]


def parent_folder_name(path: str) -> str:
    """Name of the folder directly containing ``path``.

    Root-level items report the root folder's name.
    """
    segment = parent_folder_path(path).rpartition("/")[2]
    return segment or ROOT_FOLDER_NAME


def belongs_to(file: FileRecord, folder: FolderRecord, match: FolderMatch) -> bool:
    """Whether a file sits directly inside a folder.

    ``PATH`` compares full parent paths; Dropbox paths are case-insensitive.
    ``NAME`` compares only the bare parent segment, so folders sharing a name
    at different depths all claim the same files.
    """
    if match is FolderMatch.NAME:
        return parent_folder_name(file.path) == folder.name
    return parent_folder_path(file.path).lower() == folder.path.lower()


def link_folder(folder: FolderRecord, files: Sequence[FileRecord], match: FolderMatch) -> FolderRecord:
    """Return a copy of ``folder`` with its image and markdown child ids."""
    members = [
        file for file in files if file.type in LINKABLE_TYPES and belongs_to(file, folder, match)
    ]
    return folder.model_copy(
        update={
            "image_child_ids": tuple(f.id for f in members if f.type is RecordType.IMAGE),
            "markdown_child_ids": tuple(f.id for f in members if f.type is RecordType.MARKDOWN),
        }
    )


def link_folders(
    folders: Iterable[FolderRecord],
    files: Iterable[FileRecord],
    match: FolderMatch = FolderMatch.PATH,
) -> list[FolderRecord]:
    """Link every folder to its image and markdown files.

    Default-type files are never linked; they are only reachable from the
    flat record set.
    """
    files = list(files)
    linked = [link_folder(folder, files, match) for folder in folders]

    logger.debug(
        "folders_linked",
        folders=len(linked),
        links=sum(len(f.image_child_ids) + len(f.markdown_child_ids) for f in linked),
        match=match.value,
    )
    return linked


def link_records(
    folders: Iterable[FolderRecord],
    files: Iterable[FileRecord],
    match: FolderMatch = FolderMatch.PATH,
) -> list[AnyRecord]:
    """Linked folders followed by the file records."""
    files = list(files)
    return [*link_folders(folders, files, match), *files]
