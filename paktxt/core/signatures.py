"""Magic-number detection of common binary file formats."""

from pathlib import Path
from typing import NamedTuple, Optional

# Enough for every signature below, including the PE header lookup
READ_BUFFER_SIZE = 256

# Shorter prefixes cannot be told apart from text
MIN_SIGNATURE_BYTES = 4

PE_OFFSET_POINTER = 0x3C
PE_HEADER = b"PE\x00\x00"


class Signature(NamedTuple):
    """A format name and the bytes expected at a given offset."""

    name: str
    magic: bytes
    offset: int = 0


BINARY_SIGNATURES: tuple[Signature, ...] = (
    Signature("elf", b"\x7fELF"),
    Signature("mach-o", b"\xfe\xed\xfa\xce"),
    Signature("mach-o", b"\xce\xfa\xed\xfe"),
    Signature("mach-o", b"\xfe\xed\xfa\xcf"),
    Signature("mach-o", b"\xcf\xfa\xed\xfe"),
    Signature("zip", b"PK\x03\x04"),
    Signature("zip", b"PK\x05\x06"),
    Signature("zip", b"PK\x07\x08"),
    Signature("gzip", b"\x1f\x8b"),
    Signature("7z", b"7z\xbc\xaf\x27\x1c"),
    Signature("sqlite3", b"SQLite format 3\x00"),
    Signature("png", b"\x89PNG\r\n\x1a\n"),
    Signature("jpeg", b"\xff\xd8\xff\xe0"),
    Signature("jpeg", b"\xff\xd8\xff\xe1"),
    Signature("gif", b"GIF87a"),
    Signature("gif", b"GIF89a"),
    Signature("bmp", b"BM"),
    Signature("pdf", b"%PDF"),
)


def _is_pe_executable(prefix: bytes) -> bool:
    """Check for 'MZ' plus a 'PE\\0\\0' header at the offset stored at 0x3C."""
    if not prefix.startswith(b"MZ"):
        return False
    if len(prefix) < PE_OFFSET_POINTER + 4:
        return False

    pe_offset = int.from_bytes(
        prefix[PE_OFFSET_POINTER:PE_OFFSET_POINTER + 4], "little"
    )
    if pe_offset + 4 > len(prefix):
        return False
    return prefix[pe_offset:pe_offset + 4] == PE_HEADER


def detect_format(prefix: bytes) -> Optional[str]:
    """
    Return the name of the binary format ``prefix`` starts with, or None.

    Args:
        prefix: Leading bytes of a file (at most READ_BUFFER_SIZE are used)

    Returns:
        Format name such as "elf" or "png", or None for text/unknown content
    """
    prefix = prefix[:READ_BUFFER_SIZE]
    if len(prefix) < MIN_SIGNATURE_BYTES:
        return None

    for signature in BINARY_SIGNATURES:
        end = signature.offset + len(signature.magic)
        if prefix[signature.offset:end] == signature.magic:
            return signature.name

    if _is_pe_executable(prefix):
        return "pe"

    return None


def classify(prefix: bytes) -> bool:
    """Return True when ``prefix`` matches a known binary signature."""
    return detect_format(prefix) is not None


def is_binary_file(path: Path) -> bool:
    """
    Read the start of a file and classify it.

    Raises:
        OSError: If the file cannot be opened or read. Callers decide
            whether that means skip or warn-and-include.
    """
    with open(path, "rb") as f:
        prefix = f.read(READ_BUFFER_SIZE)
    return classify(prefix)
