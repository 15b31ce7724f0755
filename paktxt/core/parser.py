"""State-machine parser for paktxt archive text."""

import logging
from collections.abc import Iterator
from enum import Enum
from typing import Optional, Union

from .errors import ArchiveFormatError
from .records import (
    CONTENT_LABEL,
    END_DELIMITER,
    EXECUTABLE_LABEL,
    FILENAME_LABEL,
    START_DELIMITER,
    TEXT_ENCODING,
    TEXT_ERRORS,
    TRAILING_NEWLINE_LABEL,
    FileRecord,
    encode_archive_text,
)

logger = logging.getLogger(__name__)

_START = START_DELIMITER.encode(TEXT_ENCODING)
_END = END_DELIMITER.encode(TEXT_ENCODING)
_FILENAME = FILENAME_LABEL.encode(TEXT_ENCODING)
_EXECUTABLE = EXECUTABLE_LABEL.encode(TEXT_ENCODING)
_TRAILING_NEWLINE = TRAILING_NEWLINE_LABEL.encode(TEXT_ENCODING)
_CONTENT = CONTENT_LABEL.encode(TEXT_ENCODING)


class ParserState(str, Enum):
    """Where the parser is within the archive."""

    SEEKING_BLOCK_START = "seeking_block_start"
    READING_METADATA = "reading_metadata"
    READING_CONTENT = "reading_content"


def _skip_line_terminator(data: bytes, pos: int) -> int:
    """Skip one LF, or one CR with an optional LF, starting at ``pos``."""
    if data[pos:pos + 1] == b"\n":
        return pos + 1
    if data[pos:pos + 1] == b"\r":
        pos += 1
        if data[pos:pos + 1] == b"\n":
            pos += 1
    return pos


def restore_original_content(content: bytes, has_trailing_newline: bool) -> bytes:
    """
    Undo the LF the serializer adds before the end delimiter.

    Only applies when the original file had no trailing newline. One CRLF
    is removed if present, otherwise one LF.
    """
    if has_trailing_newline or not content:
        return content
    if content.endswith(b"\r\n"):
        return content[:-2]
    if content.endswith(b"\n"):
        return content[:-1]
    return content


class _BlockBuilder:
    """Metadata collected for the block currently being read."""

    def __init__(self):
        self.filename = ""
        self.is_executable = False
        self.has_trailing_newline = False

    def apply(self, line: bytes) -> bool:
        """
        Store a metadata line. Later labels overwrite earlier ones.

        Returns:
            False if the line is not a recognized label
        """
        if line.startswith(_FILENAME):
            self.filename = line[len(_FILENAME):].decode(TEXT_ENCODING, TEXT_ERRORS)
        elif line.startswith(_EXECUTABLE):
            self.is_executable = line[len(_EXECUTABLE):] == b"true"
        elif line.startswith(_TRAILING_NEWLINE):
            self.has_trailing_newline = line[len(_TRAILING_NEWLINE):] == b"true"
        else:
            return False
        return True

    def build(self, content: bytes) -> FileRecord:
        return FileRecord(
            filename=self.filename,
            is_executable=self.is_executable,
            has_trailing_newline=self.has_trailing_newline,
            content=restore_original_content(content, self.has_trailing_newline),
        )


class ArchiveParser:
    """
    Parses archive text into FileRecords.

    Blocks are located purely by searching for the exact delimiter
    strings, so file content may contain anything except the end
    delimiter itself. Parsing is lenient about metadata: unknown lines
    produce a warning and blocks without a filename are skipped.
    """

    def __init__(self):
        self.blocks_skipped = 0
        self.state = ParserState.SEEKING_BLOCK_START

    def parse(self, text: Union[str, bytes]) -> Iterator[FileRecord]:
        """
        Yield one record per well-formed block.

        Args:
            text: Archive text, as str or raw bytes

        Raises:
            ArchiveFormatError: If no block is found, metadata runs off the
                end of the data, or a block has no end delimiter
        """
        data = encode_archive_text(text)
        self.blocks_skipped = 0
        self.state = ParserState.SEEKING_BLOCK_START

        pos = data.find(_START)
        if pos == -1:
            raise ArchiveFormatError(
                "no file blocks found in paktxt content (missing start delimiter)"
            )

        block: Optional[_BlockBuilder] = None

        while True:
            if self.state is ParserState.SEEKING_BLOCK_START:
                start = data.find(_START, pos)
                if start == -1:
                    return
                pos = _skip_line_terminator(data, start + len(_START))
                block = _BlockBuilder()
                self.state = ParserState.READING_METADATA

            elif self.state is ParserState.READING_METADATA:
                line_end = data.find(b"\n", pos)
                if line_end == -1:
                    raise ArchiveFormatError(
                        "malformed paktxt content: unexpected end of data "
                        "during metadata parsing"
                    )
                line = data[pos:line_end]
                if line.endswith(b"\r"):
                    line = line[:-1]
                pos = line_end + 1

                if block.apply(line):
                    continue
                if line.startswith(_CONTENT):
                    self.state = ParserState.READING_CONTENT
                elif line.strip():
                    logger.warning(
                        "Warning: Unexpected line in metadata block for file %r: %r",
                        block.filename,
                        line.decode(TEXT_ENCODING, TEXT_ERRORS),
                    )

            elif self.state is ParserState.READING_CONTENT:
                end = data.find(_END, pos)
                if end == -1:
                    raise ArchiveFormatError(
                        "malformed paktxt content: missing end delimiter "
                        "for file block"
                    )
                content = data[pos:end]
                pos = _skip_line_terminator(data, end + len(_END))
                self.state = ParserState.SEEKING_BLOCK_START

                if not block.filename:
                    logger.warning(
                        "Warning: Skipping malformed file block (no filename found)."
                    )
                    self.blocks_skipped += 1
                    continue

                yield block.build(content)


def parse_archive(text: Union[str, bytes]) -> list[FileRecord]:
    """Parse archive text fully and return all records."""
    return list(ArchiveParser().parse(text))
