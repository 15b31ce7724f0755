"""Restores files on disk from paktxt archive text."""

import logging
import os
import posixpath
from pathlib import Path
from typing import Optional, Union

from .filters import PathFilter
from .parser import ArchiveParser
from .records import FileRecord

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o644
EXECUTABLE_MODE = 0o755


def is_safe_relative_path(filename: str) -> bool:
    """Return True if ``filename`` stays inside the destination directory."""
    if filename.startswith("/") or filename.startswith("\\"):
        return False
    if os.path.isabs(filename) or os.path.splitdrive(filename)[0]:
        return False
    normalized = posixpath.normpath(filename.replace("\\", "/"))
    return normalized != ".." and not normalized.startswith("../")


class ArchiveRestorer:
    """
    Writes the files described by archive text below a destination root.

    Filter and exclude patterns are re-applied to the stored filenames;
    binary signatures are not checked again. Any failure to create a
    directory or write a file aborts the restore.
    """

    def __init__(
        self,
        destination: Path,
        exclude_patterns: Optional[list[str]] = None,
        filter_patterns: Optional[list[str]] = None,
    ):
        """
        Initialize restorer.

        Args:
            destination: Directory restored paths are relative to
            exclude_patterns: Globs for files not to restore
            filter_patterns: Whitelist globs; only matching files are restored
        """
        self.destination = Path(destination)
        self.path_filter = PathFilter(
            exclude_patterns=exclude_patterns,
            filter_patterns=filter_patterns,
            check_signatures=False,
        )
        self.parser = ArchiveParser()

    def write_record(self, record: FileRecord) -> Path:
        """
        Write one record to disk.

        Raises:
            OSError: If the parent directory or the file cannot be written
        """
        target = self.destination / record.filename
        target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)

        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(record.content)

        if record.is_executable:
            try:
                os.chmod(target, EXECUTABLE_MODE)
            except OSError as e:
                logger.warning(
                    "Warning: Failed to set executable permission for '%s': %s",
                    record.filename,
                    e,
                )
        return target

    def restore(self, text: Union[str, bytes]) -> dict:
        """
        Parse archive text and write every selected file.

        Args:
            text: Archive text, as str or raw bytes

        Returns:
            Dictionary with restore results:
                - restored: Filenames written, in archive order
                - skipped: Filenames not written (patterns or unsafe paths)
                - malformed_blocks: Blocks dropped for lacking a filename

        Raises:
            ArchiveFormatError: If the archive text is malformed
            OSError: If a directory or file cannot be written
        """
        restored: list[str] = []
        skipped: list[str] = []

        for record in self.parser.parse(text):
            if not self.path_filter.allows_restore(record.filename):
                skipped.append(record.filename)
                continue

            if not is_safe_relative_path(record.filename):
                logger.warning(
                    "Warning: Refusing to restore %s outside the destination",
                    record.filename,
                )
                skipped.append(record.filename)
                continue

            try:
                self.write_record(record)
            except OSError as e:
                logger.error("Failed to write file '%s': %s", record.filename, e)
                raise

            logger.info("Restored: %s", record.filename)
            restored.append(record.filename)

        return {
            "restored": restored,
            "skipped": skipped,
            "malformed_blocks": self.parser.blocks_skipped,
        }


def restore_archive(
    text: Union[str, bytes],
    destination: Path,
    exclude_patterns: Optional[list[str]] = None,
    filter_patterns: Optional[list[str]] = None,
) -> dict:
    """Convenience wrapper around ArchiveRestorer.restore."""
    restorer = ArchiveRestorer(
        destination=destination,
        exclude_patterns=exclude_patterns,
        filter_patterns=filter_patterns,
    )
    return restorer.restore(text)
