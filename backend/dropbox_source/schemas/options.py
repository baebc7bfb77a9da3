"""Source options threaded through every pipeline stage."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_EXTENSIONS = (".jpg", ".png", ".md")


def parse_extensions(value: str) -> list[str]:
    """Split a comma-separated extension list such as ``.jpg, .md``."""
    return [part.strip() for part in value.split(",") if part.strip()]


class FolderMatch(str, enum.Enum):
    """How a file is matched to the folder that contains it."""

    PATH = "path"
    NAME = "name"


class SourceOptions(BaseModel):
    """Recognized source options, each with its default."""

    model_config = ConfigDict(frozen=True)

    path: str = ""
    recursive: bool = True
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    create_folder_nodes: bool = True
    folder_match: FolderMatch = FolderMatch.PATH

    @field_validator("extensions")
    @classmethod
    def require_dot_prefix(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Extensions are compared against ``PurePosixPath.suffix``."""
        for ext in value:
            if not ext.startswith("."):
                raise ValueError(f"Extension must start with a dot: {ext!r}")
        return value
