"""Exception types raised by paktxt."""


class PaktxtError(Exception):
    """Base class for paktxt failures."""


class ArchiveFormatError(PaktxtError, ValueError):
    """Archive text cannot be parsed (missing delimiters, truncated metadata)."""


class NoFilesFoundError(PaktxtError):
    """The file selection pipeline left nothing to pack."""


class TransportError(PaktxtError):
    """Archive text could not be moved to or from the clipboard."""
