"""Tests for entry classification."""

from __future__ import annotations

import pytest

from dropbox_source.schemas.entry import RemoteEntry
from dropbox_source.schemas.options import DEFAULT_EXTENSIONS
from dropbox_source.schemas.record import RecordType
from dropbox_source.services.classifier import (
    IMAGE_EXTENSIONS,
    classify_type,
    extract_files,
    extract_folders,
)


# =============================================================================
# extract_files / extract_folders
# =============================================================================


class TestExtractFiles:
    """Tests for the extension allow-list."""

    def test_keeps_allowed_extensions(self, file_entry):
        """Test that files with an allowed extension are kept."""
        entries = [
            file_entry("1", "/a.md"),
            file_entry("2", "/b.jpg"),
            file_entry("3", "/c.png"),
        ]
        result = extract_files(entries, DEFAULT_EXTENSIONS)
        assert [e.id for e in result] == ["1", "2", "3"]

    def test_drops_disallowed_extensions(self, file_entry):
        """Test that files outside the allow-list are dropped."""
        entries = [file_entry("1", "/notes.txt"), file_entry("2", "/archive.zip")]
        assert extract_files(entries, DEFAULT_EXTENSIONS) == []

    def test_extension_match_is_case_sensitive(self, file_entry):
        """Test that .JPG is not allowed by .jpg."""
        entries = [file_entry("1", "/IMG_0001.JPG")]
        assert extract_files(entries, DEFAULT_EXTENSIONS) == []

    def test_files_without_extension_are_dropped(self, file_entry):
        """Test that extensionless files never match."""
        entries = [file_entry("1", "/Makefile")]
        assert extract_files(entries, DEFAULT_EXTENSIONS) == []

    def test_folders_are_never_files(self, folder_entry):
        """Test that a folder whose name looks like a file is not kept."""
        entries = [folder_entry("1", "/site.md")]
        assert extract_files(entries, DEFAULT_EXTENSIONS) == []

    def test_custom_extensions(self, file_entry):
        """Test a configured allow-list other than the default."""
        entries = [file_entry("1", "/a.md"), file_entry("2", "/b.pdf")]
        result = extract_files(entries, (".pdf",))
        assert [e.id for e in result] == ["2"]


class TestExtractFolders:
    """Tests for folder extraction."""

    def test_keeps_only_folders(self, file_entry, folder_entry):
        """Test that every folder is kept and files are not."""
        entries = [
            folder_entry("f1", "/docs"),
            file_entry("1", "/docs/a.md"),
            folder_entry("f2", "/docs/old.v1"),
        ]
        assert [e.id for e in extract_folders(entries)] == ["f1", "f2"]

    def test_deleted_entries_are_skipped(self):
        """Test that deleted entries are neither files nor folders."""
        deleted = RemoteEntry.model_validate({".tag": "deleted", "name": "gone.md"})
        assert extract_folders([deleted]) == []
        assert extract_files([deleted], DEFAULT_EXTENSIONS) == []


# =============================================================================
# classify_type
# =============================================================================


class TestClassifyType:
    """Tests for the extension-to-type mapping."""

    def test_markdown(self, file_entry):
        """Test that .md maps to markdown."""
        assert classify_type(file_entry("1", "/a.md"), True) is RecordType.MARKDOWN

    @pytest.mark.parametrize("ext", sorted(IMAGE_EXTENSIONS))
    def test_every_image_extension_maps_to_image(self, file_entry, ext):
        """Test that all image extensions map to image, not only .png."""
        assert classify_type(file_entry("1", f"/photo{ext}"), True) is RecordType.IMAGE

    def test_jpg_is_image(self, file_entry):
        """Test .jpg explicitly; the source plugin classified it as default."""
        assert classify_type(file_entry("1", "/photo.jpg"), True) is RecordType.IMAGE

    def test_other_extensions_are_default(self, file_entry):
        """Test that unknown extensions map to default."""
        assert classify_type(file_entry("1", "/report.pdf"), True) is RecordType.DEFAULT

    def test_uppercase_image_extension_is_default(self, file_entry):
        """Test that classification is case-sensitive like filtering."""
        assert classify_type(file_entry("1", "/photo.PNG"), True) is RecordType.DEFAULT

    @pytest.mark.parametrize("path", ["/a.md", "/b.png", "/c.jpg", "/d.pdf"])
    def test_everything_is_default_without_folders(self, file_entry, path):
        """Test that disabling folder records makes every file default."""
        assert classify_type(file_entry("1", path), False) is RecordType.DEFAULT
