"""Archive format constants and the in-memory file record."""

from pydantic import BaseModel, Field

ARCHIVE_EXTENSION = ".paktxt"
PROGRAM_NAME = "paktxt"

# Split literals so this module never contains a complete delimiter itself
DELIMITER_TOKEN = "19f8e7d6-c5b4-a321-b0e9-f8a7d6c5b4a3"
START_DELIMITER = "---PAKTXT" + "_FILE_START-" + DELIMITER_TOKEN + "---"
END_DELIMITER = "---PAKTXT" + "_FILE_END-" + DELIMITER_TOKEN + "---"

FILENAME_LABEL = "filename: "
EXECUTABLE_LABEL = "executable: "
TRAILING_NEWLINE_LABEL = "trailing_newline: "
CONTENT_LABEL = "content:"

UTF8_BOM = b"\xef\xbb\xbf"

ARCHIVE_HEADER = """PAKTXT
This document contains a collection of text-based files from a directory,
concatenated into a single .paktxt file by the 'paktxt' tool.

Each file's content is embedded within distinct blocks, defined by unique start and end delimiters.
The original file path is specified by a 'filename:' label,
its executable status by an 'executable:' label, and the content follows a 'content:' label.
A 'trailing_newline:' label indicates if the original file ended with a newline.

File Block Structure (conceptual example, not parsable as content):
---PAKTXT_FILE_START-...---
filename: path/to/your/file.py
executable: true
trailing_newline: true
content:
# Your file content here
---PAKTXT_FILE_END-...---

"""

# Opening shared by headers of every paktxt release, including those that
# end the line with "Go program." instead of "tool."
ARCHIVE_HEADER_PREFIX = (
    "PAKTXT\n"
    "This document contains a collection of text-based files from a directory,\n"
    "concatenated into a single .paktxt file by the 'paktxt' "
)

# Archive text is carried as str; surrogateescape keeps non-UTF-8 bytes intact
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


class FileRecord(BaseModel):
    """One file as stored in (or parsed from) an archive block."""

    filename: str = Field(..., description="Relative path using forward slashes")
    is_executable: bool = Field(
        default=False, description="Whether any execute permission bit was set"
    )
    has_trailing_newline: bool = Field(
        default=False, description="Whether the original file ended with LF"
    )
    content: bytes = Field(
        default=b"", description="Original bytes without a leading UTF-8 BOM"
    )


def encode_archive_text(text) -> bytes:
    """Return archive text as bytes, accepting either str or bytes."""
    if isinstance(text, (bytes, bytearray)):
        return bytes(text)
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def decode_archive_bytes(data: bytes) -> str:
    """Inverse of encode_archive_text for str-based transports."""
    return data.decode(TEXT_ENCODING, TEXT_ERRORS)
