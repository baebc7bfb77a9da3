"""Record schemas emitted to the sink."""

from __future__ import annotations

import enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# Parent marker for records that come straight from the remote source
SOURCE_PARENT = "__SOURCE__"

ROOT_FOLDER_ID = "dropboxRoot"
ROOT_FOLDER_NAME = "root"


class RecordType(str, enum.Enum):
    """Record type variants."""

    MARKDOWN = "dropboxMarkdown"
    IMAGE = "dropboxImage"
    DEFAULT = "dropboxNode"
    FOLDER = "dropboxFolder"


# Types that reference a downloadable payload
FILE_RECORD_TYPES = frozenset({RecordType.MARKDOWN, RecordType.IMAGE, RecordType.DEFAULT})

# Types a folder links to
LINKABLE_TYPES = frozenset({RecordType.MARKDOWN, RecordType.IMAGE})


class PayloadRef(BaseModel):
    """Reference to a locally materialized copy of a remote file."""

    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    name: str
    extension: str
    size: int = 0
    sha256: str


class Record(BaseModel):
    """Fields shared by every record."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent: str = SOURCE_PARENT
    children: tuple[str, ...] = ()
    type: RecordType
    content_digest: str


class FileRecord(Record):
    """A remote file."""

    name: str
    path: str
    last_modified: str | None = None
    local_file: PayloadRef | None = None


class FolderRecord(Record):
    """A remote folder with the ids of the images and documents it holds."""

    type: RecordType = RecordType.FOLDER
    name: str
    path: str
    image_child_ids: tuple[str, ...] = Field(default=())
    markdown_child_ids: tuple[str, ...] = Field(default=())


AnyRecord = Union[FileRecord, FolderRecord]
