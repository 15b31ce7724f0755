"""Tests for archive text serialization."""

import logging
import os

from paktxt.core.records import (
    ARCHIVE_HEADER,
    END_DELIMITER,
    START_DELIMITER,
    FileRecord,
)
from paktxt.core.serializer import ArchiveSerializer, build_archive, render_block


def _block(filename, executable, trailing, body):
    return (
        f"{START_DELIMITER}\n"
        f"filename: {filename}\n"
        f"executable: {executable}\n"
        f"trailing_newline: {trailing}\n"
        "content:\n"
        f"{body}"
        f"{END_DELIMITER}\n\n"
    )


class TestRenderBlock:
    """Test the layout of a single block."""

    def test_block_with_trailing_newline(self):
        """Test content ending in LF is stored verbatim."""
        record = FileRecord(
            filename="a.txt", has_trailing_newline=True, content=b"hello\n"
        )
        assert render_block(record).decode() == _block("a.txt", "false", "true", "hello\n")

    def test_block_without_trailing_newline_is_padded(self):
        """Test a missing final LF is added so the end delimiter has its own line."""
        record = FileRecord(filename="b.txt", is_executable=True, content=b"hello")
        assert render_block(record).decode() == _block("b.txt", "true", "false", "hello\n")

    def test_empty_file(self):
        """Test an empty file still produces a well-formed block."""
        record = FileRecord(filename="empty.txt")
        assert render_block(record).decode() == _block("empty.txt", "false", "false", "\n")


class TestArchiveSerializer:
    """Test serializing files from disk."""

    def test_header_and_order(self, tmp_path):
        """Test the header comes first and blocks follow the given order."""
        (tmp_path / "b.txt").write_text("b\n")
        (tmp_path / "a.txt").write_text("a\n")

        text = build_archive(tmp_path, ["b.txt", "a.txt"])

        assert text.startswith(ARCHIVE_HEADER)
        assert text == (
            ARCHIVE_HEADER
            + _block("b.txt", "false", "true", "b\n")
            + _block("a.txt", "false", "true", "a\n")
        )

    def test_executable_bit(self, tmp_path):
        """Test any execute bit marks the file executable."""
        for name, mode in [("owner", 0o744), ("group", 0o654), ("none", 0o644)]:
            path = tmp_path / name
            path.write_text("x\n")
            os.chmod(path, mode)

        serializer = ArchiveSerializer(tmp_path)
        assert serializer.read_record("owner").is_executable is True
        assert serializer.read_record("group").is_executable is True
        assert serializer.read_record("none").is_executable is False

    def test_bom_stripped(self, tmp_path):
        """Test a leading UTF-8 BOM is not stored."""
        (tmp_path / "bom.txt").write_bytes(b"\xef\xbb\xbfhello\n")

        record = ArchiveSerializer(tmp_path).read_record("bom.txt")

        assert record.content == b"hello\n"
        assert record.has_trailing_newline is True

    def test_crlf_counts_as_trailing_newline(self, tmp_path):
        """Test CRLF endings set the trailing newline flag."""
        (tmp_path / "win.txt").write_bytes(b"line\r\n")
        record = ArchiveSerializer(tmp_path).read_record("win.txt")
        assert record.has_trailing_newline is True
        assert record.content == b"line\r\n"

    def test_unreadable_file_skipped(self, tmp_path, caplog):
        """Test a missing file is logged and the rest is still packed."""
        (tmp_path / "ok.txt").write_text("ok\n")
        serializer = ArchiveSerializer(tmp_path)

        with caplog.at_level(logging.WARNING):
            text = serializer.serialize(["gone.txt", "ok.txt"])

        assert "Could not read file gone.txt" in caplog.text
        assert "filename: ok.txt" in text
        assert "filename: gone.txt" not in text
        assert serializer.files_packed == 1
        assert serializer.files_skipped == ["gone.txt"]

    def test_previous_archive_skipped(self, tmp_path):
        """Test a renamed archive is recognized by its header and skipped."""
        (tmp_path / "a.txt").write_text("a\n")
        old_archive = build_archive(tmp_path, ["a.txt"])
        (tmp_path / "backup.txt").write_text(old_archive)

        serializer = ArchiveSerializer(tmp_path)
        text = serializer.serialize(["a.txt", "backup.txt"])

        assert "filename: backup.txt" not in text
        assert serializer.files_skipped == ["backup.txt"]

    def test_previous_archive_with_bom_skipped(self, tmp_path):
        """Test the header check runs after BOM stripping."""
        (tmp_path / "saved.md").write_bytes(
            b"\xef\xbb\xbf" + ARCHIVE_HEADER.encode("utf-8")
        )
        serializer = ArchiveSerializer(tmp_path)
        serializer.serialize(["saved.md"])
        assert serializer.files_packed == 0

    def test_older_header_wording_skipped(self, tmp_path):
        """Test archives whose header names the Go program are also skipped."""
        older = ARCHIVE_HEADER.replace("'paktxt' tool.", "'paktxt' Go program.")
        (tmp_path / "old.txt").write_text(older + "---PAKTXT...\n")
        (tmp_path / "a.txt").write_text("a\n")

        serializer = ArchiveSerializer(tmp_path)
        serializer.serialize(["a.txt", "old.txt"])

        assert serializer.files_skipped == ["old.txt"]

    def test_header_mention_not_at_start_kept(self, tmp_path):
        """Test only files beginning with the header are treated as archives."""
        (tmp_path / "doc.md").write_text("# Notes\n" + ARCHIVE_HEADER)

        serializer = ArchiveSerializer(tmp_path)
        serializer.serialize(["doc.md"])

        assert serializer.files_packed == 1

    def test_non_utf8_content_preserved(self, tmp_path):
        """Test arbitrary bytes survive the str round trip."""
        (tmp_path / "latin1.txt").write_bytes(b"caf\xe9\n")

        text = build_archive(tmp_path, ["latin1.txt"])

        assert b"caf\xe9\n" in text.encode("utf-8", "surrogateescape")
