"""Directory walker that selects the files to pack."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from .errors import NoFilesFoundError
from .filters import PathFilter

logger = logging.getLogger(__name__)

README_NAME = "readme.md"


def _raise_walk_error(error: OSError):
    raise error


class FileCollector:
    """
    Walks a source tree and returns the relative paths worth packing.

    Paths are yielded in depth-first order with each directory's entries
    sorted by name, so the result is deterministic across runs.
    """

    def __init__(
        self,
        source_root: Path,
        exclude_patterns: Optional[list[str]] = None,
        filter_patterns: Optional[list[str]] = None,
    ):
        """
        Initialize file collector.

        Args:
            source_root: Root directory to scan
            exclude_patterns: Globs to exclude (e.g., ["*.md", "docs/*"])
            filter_patterns: Whitelist globs (e.g., ["*.py"])
        """
        self.source_root = Path(source_root).resolve()
        self.path_filter = PathFilter(
            exclude_patterns=exclude_patterns,
            filter_patterns=filter_patterns,
        )

    def scan(self) -> list[str]:
        """
        Walk the tree and apply the path filter.

        Returns:
            Relative paths with forward slashes, in walk order

        Raises:
            FileNotFoundError: If the source root does not exist
            NotADirectoryError: If the source root is not a directory
            OSError: If the walk fails (e.g., permission denied)
        """
        if not self.source_root.exists():
            raise FileNotFoundError(f"Source root does not exist: {self.source_root}")

        if not self.source_root.is_dir():
            msg = f"Source root is not a directory: {self.source_root}"
            raise NotADirectoryError(msg)

        files: list[str] = []

        for root_str, dirs, filenames in os.walk(
            self.source_root, topdown=True, onerror=_raise_walk_error
        ):
            root = Path(root_str)
            rel_root = root.relative_to(self.source_root).as_posix()
            prefix = "" if rel_root == "." else rel_root + "/"

            # Prune in-place so os.walk does not descend
            dirs[:] = [
                dirname
                for dirname in sorted(dirs)
                if self.path_filter.should_include(prefix + dirname, is_dir=True)
            ]

            for filename in sorted(filenames):
                rel_path = prefix + filename
                if self.path_filter.should_include(
                    rel_path, is_dir=False, abs_path=root / filename
                ):
                    files.append(rel_path)

        # Same order as visiting every directory's entries by name
        files.sort(key=lambda p: p.split("/"))
        return files

    def collect(self) -> list[str]:
        """
        Scan, then move a top-level README.md to the front.

        Raises:
            NoFilesFoundError: If nothing survived the filters
        """
        files = self.scan()
        if not files:
            raise NoFilesFoundError(
                f"No relevant files found to pack in {self.source_root}"
            )

        logger.debug("Collected %d files from %s", len(files), self.source_root)
        return prioritize_readme(files)


def prioritize_readme(files: list[str]) -> list[str]:
    """
    Move a top-level readme.md (any case) to the front.

    Examples:
        >>> prioritize_readme(["a.txt", "README.md", "b/c.txt"])
        ['README.md', 'a.txt', 'b/c.txt']
    """
    for index, path in enumerate(files):
        if "/" not in path and path.lower() == README_NAME:
            return [path] + files[:index] + files[index + 1:]
    return list(files)


def is_git_repo(path: Path) -> bool:
    """Return True if ``path`` is inside a git work tree."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            cwd=path,
            capture_output=True,
            text=True,
        )
    except OSError:
        return False
    return result.returncode == 0 and result.stdout.strip() == "true"


# Convenience function for one-shot collection
def collect_files(
    source_root: Path,
    exclude_patterns: Optional[list[str]] = None,
    filter_patterns: Optional[list[str]] = None,
) -> list[str]:
    """
    Convenience function to collect files with default settings.

    Args:
        source_root: Root directory to scan
        exclude_patterns: Globs to exclude
        filter_patterns: Whitelist globs

    Returns:
        Ordered list of relative paths
    """
    collector = FileCollector(
        source_root=source_root,
        exclude_patterns=exclude_patterns,
        filter_patterns=filter_patterns,
    )
    return collector.collect()
