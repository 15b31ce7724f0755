"""Formatting utilities for paktxt."""


def format_size(bytes_: int) -> str:
    """Format an archive size for the pack summary, e.g. '12.4 KB'."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes_ < 1024.0:
            if unit == "B":
                return f"{int(bytes_)} {unit}"
            return f"{bytes_:.1f} {unit}"
        bytes_ /= 1024.0
    return f"{bytes_:.1f} PB"


def pluralize(count: int, noun: str) -> str:
    """Return e.g. '1 file' or '3 files'."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"
