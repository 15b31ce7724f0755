"""Paktxt - pack a directory of text files into one portable text archive."""

__version__ = "0.1.0"

from .core.restorer import ArchiveRestorer
from .core.scanner import FileCollector
from .core.serializer import ArchiveSerializer

__all__ = ["ArchiveRestorer", "ArchiveSerializer", "FileCollector"]
