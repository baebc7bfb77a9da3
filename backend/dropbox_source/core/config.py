"""Application configuration using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from dropbox_source.schemas.options import (
    DEFAULT_EXTENSIONS,
    FolderMatch,
    SourceOptions,
    parse_extensions,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DROPBOX_SOURCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "dropbox-source"
    version: str = "0.3.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Dropbox API
    access_token: str = Field(
        default="",
        description="Dropbox OAuth2 access token",
    )
    api_base_url: str = Field(
        default="https://api.dropboxapi.com/2",
        description="Dropbox RPC endpoint base URL",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds for Dropbox and download calls",
    )
    max_concurrent_downloads: int = Field(
        default=8,
        ge=1,
        description="Maximum number of payloads fetched at once",
    )

    # Source options
    path: str = Field(
        default="",
        description="Remote folder to scan (empty for the app root)",
    )
    recursive: bool = True
    extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Comma-separated allow-list of file extensions",
    )
    create_folder_nodes: bool = True
    folder_match: FolderMatch = FolderMatch.PATH

    # Paths
    config_path: Path = Field(
        default=Path("./config"),
        description="Path for the cache database",
    )
    cache_path: Path = Field(
        default=Path("./cache"),
        description="Path for downloaded payloads",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="Cache database URL (defaults to a SQLite file in config_path)",
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def split_extensions(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_extensions(value)
        return value

    @property
    def db_path(self) -> Path:
        """Get the SQLite cache database file path."""
        return self.config_path / "dropbox_source.db"

    def source_options(self) -> SourceOptions:
        """Build the options value passed through the pipeline."""
        return SourceOptions(
            path=self.path,
            recursive=self.recursive,
            extensions=tuple(self.extensions),
            create_folder_nodes=self.create_folder_nodes,
            folder_match=self.folder_match,
        )


# Global settings instance
settings = Settings()
