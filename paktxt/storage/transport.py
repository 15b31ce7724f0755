"""Moving archive text to and from files or the system clipboard."""

import logging
from pathlib import Path

import pyperclip

from ..core.errors import TransportError
from ..core.records import ARCHIVE_EXTENSION, encode_archive_text

logger = logging.getLogger(__name__)


def resolve_output_path(output_file: str) -> Path:
    """
    Resolve the archive output path against the current directory.

    A missing extension gets ``.paktxt`` appended. Any other extension is
    kept, with a warning.
    """
    path = Path(output_file).expanduser()
    if path.suffix == "":
        path = path.with_name(path.name + ARCHIVE_EXTENSION)
    elif path.suffix != ARCHIVE_EXTENSION:
        logger.warning(
            "Warning: Output file '%s' does not have a '%s' extension. Using as is.",
            path,
            ARCHIVE_EXTENSION,
        )
    return path.resolve()


def write_archive_file(path: Path, text: str) -> int:
    """
    Write archive text to ``path`` byte-for-byte.

    Returns:
        Number of bytes written

    Raises:
        OSError: If the file cannot be written
    """
    data = encode_archive_text(text)
    with open(path, "wb") as f:
        f.write(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return len(data)


def read_archive_file(path: Path) -> bytes:
    """
    Read archive bytes from ``path``.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, "rb") as f:
        return f.read()


def copy_to_clipboard(text: str) -> None:
    """
    Put archive text on the system clipboard.

    Raises:
        TransportError: If no clipboard mechanism is available, or the
            archive holds non-UTF-8 bytes the clipboard cannot carry
    """
    try:
        pyperclip.copy(text)
    except UnicodeError as e:
        raise TransportError(
            "Cannot copy to clipboard: the archive contains bytes that are not "
            "valid UTF-8. Use --output-file/-o instead."
        ) from e
    except pyperclip.PyperclipException as e:
        raise TransportError(
            f"Failed to copy to clipboard: {e}. This might be due to system "
            "restrictions or lack of clipboard support."
        ) from e


def read_from_clipboard() -> str:
    """
    Read archive text from the system clipboard.

    Raises:
        TransportError: If the clipboard is unavailable or empty
    """
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as e:
        raise TransportError(
            f"Failed to read from clipboard: {e}. This might be due to system "
            "restrictions or lack of clipboard content."
        ) from e

    if not text:
        raise TransportError(
            "Clipboard content is empty; no parsable paktxt data found"
        )
    return text
