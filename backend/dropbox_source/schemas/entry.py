"""Dropbox API payload schemas."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RemoteEntry(BaseModel):
    """A single item from a Dropbox folder listing.

    Dropbox tags each entry with ``.tag``; deleted entries only show up
    when the listing asks for them, which this source never does.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tag: Literal["file", "folder", "deleted"] = Field(alias=".tag")
    id: str = ""
    name: str
    path_display: str = ""
    client_modified: str | None = None

    @property
    def is_file(self) -> bool:
        return self.tag == "file"

    @property
    def is_folder(self) -> bool:
        return self.tag == "folder"

    @property
    def extension(self) -> str:
        """Dot-prefixed extension of the entry name, case preserved."""
        return PurePosixPath(self.name).suffix


class FolderMetadata(BaseModel):
    """Subset of ``files/get_metadata`` used to resolve a path."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tag: str = Field(default="folder", alias=".tag")
    id: str
    name: str = ""
    path_display: str = ""


class ListFolderResult(BaseModel):
    """One page of ``files/list_folder``."""

    model_config = ConfigDict(extra="ignore")

    entries: list[RemoteEntry] = Field(default_factory=list)
    cursor: str | None = None
    has_more: bool = False


class TemporaryLink(BaseModel):
    """Result of ``files/get_temporary_link``."""

    model_config = ConfigDict(extra="ignore")

    link: str
