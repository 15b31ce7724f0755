"""Path selection rules shared by packing and restoring."""

import fnmatch
import logging
import posixpath
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from .records import ARCHIVE_EXTENSION, PROGRAM_NAME
from .signatures import is_binary_file

logger = logging.getLogger(__name__)

# Directories whose whole subtree is never packed
EXCLUDED_DIRS = frozenset(
    {
        ".git",
        "node_modules",
        "vendor",
        "__pycache__",
        "build",
        "dist",
        "target",
        ".idea",
        ".vscode",
        ".cache",
        "tmp",
    }
)

# OS housekeeping files, compared against the lowercased base name
EXCLUDED_NAMES = frozenset(
    {
        ".ds_store",
        "thumbs.db",
        "desktop.ini",
        ".localized",
        "icon\r",  # macOS custom folder icon
    }
)

EXCLUDED_EXTENSIONS = frozenset(
    {
        # Executables and libraries
        ".exe", ".dll", ".so", ".dylib",
        # Archives
        ".zip", ".tar", ".gz", ".rar", ".7z",
        # Images and icons
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".ico",
        # Audio and video
        ".mp3", ".wav", ".ogg", ".mp4", ".avi", ".mov", ".mkv",
        # Documents and databases
        ".pdf", ".sqlite", ".db", ".sqlite3",
        # Logs, generic binaries, locks
        ".log", ".bin", ".lock", ".dat",
        # Compiled artifacts
        ".class", ".jar", ".obj", ".lib", ".a", ".pyc",
        # Temporary, backup and editor swap files
        ".tmp", ".bak", ".swp", ".swo",
        # IDE project and user files
        ".iml", ".project", ".classpath",
        ".vspscc", ".vssscc", ".suo", ".user",
        ".ncb", ".sdf", ".ipch",
        # Our own output
        ARCHIVE_EXTENSION,
    }
)

SELF_BINARY_NAMES = frozenset({PROGRAM_NAME, PROGRAM_NAME + ".exe"})


def parse_patterns(patterns: Optional[str]) -> list[str]:
    """
    Split a comma-separated pattern string.

    Entries are trimmed and empty entries dropped.

    Examples:
        >>> parse_patterns(" *.log, ,tmp/* ")
        ['*.log', 'tmp/*']
    """
    if not patterns:
        return []
    return [p.strip() for p in patterns.split(",") if p.strip()]


def matches_pattern(rel_path: str, patterns: Iterable[str]) -> bool:
    """Return True if the base name or the full relative path matches any glob."""
    name = posixpath.basename(rel_path)
    for pattern in patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
        if fnmatch.fnmatch(rel_path, pattern):
            return True
    return False


def is_self_artifact(rel_path: str) -> bool:
    """Return True for archive outputs and for the paktxt executable itself."""
    if rel_path.lower().endswith(ARCHIVE_EXTENSION):
        return True
    return posixpath.basename(rel_path).lower() in SELF_BINARY_NAMES


def has_excluded_name(rel_path: str) -> bool:
    """Built-in name, extension and path-component denylist."""
    lowered = rel_path.lower()
    name = posixpath.basename(lowered)
    if name in EXCLUDED_NAMES:
        return True

    # Dotfiles such as .project count as their own extension
    ext = name[name.rfind("."):] if "." in name else ""
    if ext in EXCLUDED_EXTENSIONS:
        return True

    # Catches excluded directories even if the walk did not prune them
    return any(part in EXCLUDED_DIRS for part in lowered.split("/"))


class PathFilter:
    """
    Decides which directory entries are collected.

    Checks run cheapest first. Directories are only pruned by the
    excluded-directory set. Files are checked against archive outputs and
    the paktxt executable, the filter whitelist, the exclude globs, the
    built-in denylist and finally the binary signature check.
    """

    def __init__(
        self,
        exclude_patterns: Optional[list[str]] = None,
        filter_patterns: Optional[list[str]] = None,
        check_signatures: bool = True,
    ):
        """
        Initialize path filter.

        Args:
            exclude_patterns: Globs to exclude (e.g., ["*.md", "temp/*"])
            filter_patterns: Whitelist globs; when non-empty a file must
                match one of them to be considered at all
            check_signatures: Whether to sniff file content for binary
                signatures (default: True)
        """
        self.exclude_patterns = list(exclude_patterns or [])
        self.filter_patterns = list(filter_patterns or [])
        self.check_signatures = check_signatures

    def should_include(
        self, rel_path: str, is_dir: bool, abs_path: Optional[Path] = None
    ) -> bool:
        """
        Apply the selection rules to one entry.

        Args:
            rel_path: Path relative to the scan root, forward slashes
            is_dir: Whether the entry is a directory
            abs_path: Location on disk for the signature check
                (defaults to rel_path)

        Returns:
            For directories, whether to descend. For files, whether to collect.
        """
        if is_dir:
            return posixpath.basename(rel_path) not in EXCLUDED_DIRS

        if is_self_artifact(rel_path):
            return False

        if self.filter_patterns and not matches_pattern(
            rel_path, self.filter_patterns
        ):
            logger.debug("Not matched by filter: %s", rel_path)
            return False

        if matches_pattern(rel_path, self.exclude_patterns):
            logger.debug("Excluded by pattern: %s", rel_path)
            return False

        if has_excluded_name(rel_path):
            return False

        if self.check_signatures:
            try:
                if is_binary_file(abs_path if abs_path is not None else Path(rel_path)):
                    logger.info("Skipping binary file (by signature): %s", rel_path)
                    return False
            except OSError as e:
                logger.warning(
                    "Warning: Error checking binary signature for %s: %s", rel_path, e
                )

        return True

    def allows_restore(self, filename: str) -> bool:
        """Filter whitelist, then exclude globs. No content checks."""
        if self.filter_patterns and not matches_pattern(
            filename, self.filter_patterns
        ):
            logger.info("Skipping restoration of filtered file: %s", filename)
            return False

        if matches_pattern(filename, self.exclude_patterns):
            logger.info(
                "Skipping restoration of excluded file: %s (due to --exclude)",
                filename,
            )
            return False

        return True
