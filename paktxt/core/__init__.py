"""Core packing and restoring functionality for paktxt."""

from .parser import ArchiveParser
from .records import FileRecord
from .restorer import ArchiveRestorer
from .scanner import FileCollector
from .serializer import ArchiveSerializer

__all__ = [
    "ArchiveParser",
    "ArchiveRestorer",
    "ArchiveSerializer",
    "FileCollector",
    "FileRecord",
]
