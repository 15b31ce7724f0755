"""Archive text builder for paktxt."""

import logging
import os
import stat
from collections.abc import Iterable
from pathlib import Path

from .records import (
    ARCHIVE_HEADER,
    ARCHIVE_HEADER_PREFIX,
    CONTENT_LABEL,
    END_DELIMITER,
    EXECUTABLE_LABEL,
    FILENAME_LABEL,
    START_DELIMITER,
    TEXT_ENCODING,
    TEXT_ERRORS,
    TRAILING_NEWLINE_LABEL,
    UTF8_BOM,
    FileRecord,
    decode_archive_bytes,
)

logger = logging.getLogger(__name__)

EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

_HEADER_BYTES = ARCHIVE_HEADER.encode(TEXT_ENCODING)
_HEADER_PREFIX_BYTES = ARCHIVE_HEADER_PREFIX.encode(TEXT_ENCODING)


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def render_block(record: FileRecord) -> bytes:
    """
    Render one delimited file block.

    The end delimiter always starts on its own line: when the file has no
    trailing newline, one LF is appended after the content.
    """
    header = (
        f"{START_DELIMITER}\n"
        f"{FILENAME_LABEL}{record.filename}\n"
        f"{EXECUTABLE_LABEL}{_bool_text(record.is_executable)}\n"
        f"{TRAILING_NEWLINE_LABEL}{_bool_text(record.has_trailing_newline)}\n"
        f"{CONTENT_LABEL}\n"
    ).encode(TEXT_ENCODING, TEXT_ERRORS)

    padding = b"" if record.has_trailing_newline else b"\n"
    footer = f"{END_DELIMITER}\n\n".encode(TEXT_ENCODING)
    return header + record.content + padding + footer


class ArchiveSerializer:
    """
    Builds archive text from an ordered list of relative paths.

    Unreadable files are logged and skipped; the rest of the batch is
    still packed. Counts from the last run are kept on the instance.
    """

    def __init__(self, source_root: Path):
        """
        Initialize serializer.

        Args:
            source_root: Directory the relative paths are resolved against
        """
        self.source_root = Path(source_root)
        self.files_packed = 0
        self.files_skipped: list[str] = []

    def read_record(self, rel_path: str) -> FileRecord:
        """
        Read one file from disk into a record.

        Raises:
            OSError: If the file content cannot be read
        """
        path = self.source_root / rel_path
        with open(path, "rb") as f:
            raw = f.read()

        content = raw[len(UTF8_BOM):] if raw.startswith(UTF8_BOM) else raw

        try:
            is_executable = bool(os.stat(path).st_mode & EXECUTE_BITS)
        except OSError as e:
            logger.warning(
                "Warning: Could not get file info for %s: %s. "
                "Assuming non-executable.",
                rel_path,
                e,
            )
            is_executable = False

        # CRLF endings count as a trailing newline too
        return FileRecord(
            filename=rel_path,
            is_executable=is_executable,
            has_trailing_newline=raw.endswith(b"\n"),
            content=content,
        )

    def serialize(self, paths: Iterable[str]) -> str:
        """
        Build the complete archive text.

        Args:
            paths: Relative paths in the order they should appear

        Returns:
            Archive text, header first
        """
        self.files_packed = 0
        self.files_skipped = []
        chunks = [_HEADER_BYTES]

        for rel_path in paths:
            try:
                record = self.read_record(rel_path)
            except OSError as e:
                logger.warning("Warning: Could not read file %s: %s", rel_path, e)
                self.files_skipped.append(rel_path)
                continue

            # Never pack a previous archive, whatever it is named
            if record.content.startswith(_HEADER_PREFIX_BYTES):
                logger.info(
                    "Skipping file %s as it appears to be a paktxt output.", rel_path
                )
                self.files_skipped.append(rel_path)
                continue

            chunks.append(render_block(record))
            self.files_packed += 1

        logger.debug(
            "Serialized %d files (%d skipped)",
            self.files_packed,
            len(self.files_skipped),
        )
        return decode_archive_bytes(b"".join(chunks))


def build_archive(source_root: Path, paths: Iterable[str]) -> str:
    """Convenience wrapper around ArchiveSerializer.serialize."""
    return ArchiveSerializer(source_root).serialize(paths)
