"""Tests for binary signature detection."""

import pytest

from paktxt.core.signatures import (
    BINARY_SIGNATURES,
    READ_BUFFER_SIZE,
    classify,
    detect_format,
    is_binary_file,
)


def _pe_prefix(pe_offset: int, size: int = READ_BUFFER_SIZE) -> bytearray:
    """Build an 'MZ' prefix pointing at a PE header at ``pe_offset``."""
    data = bytearray(b"MZ" + b"\x00" * (size - 2))
    data[0x3C:0x40] = pe_offset.to_bytes(4, "little")
    if pe_offset + 4 <= size:
        data[pe_offset:pe_offset + 4] = b"PE\x00\x00"
    return data


class TestClassify:
    """Test magic-number classification of byte prefixes."""

    @pytest.mark.parametrize(
        "prefix, expected",
        [
            (b"\x7fELF\x02\x01\x01\x00", "elf"),
            (b"\xcf\xfa\xed\xfe\x07\x00", "mach-o"),
            (b"\xfe\xed\xfa\xce\x00\x00", "mach-o"),
            (b"PK\x03\x04\x14\x00", "zip"),
            (b"PK\x05\x06\x00\x00", "zip"),
            (b"\x1f\x8b\x08\x00", "gzip"),
            (b"7z\xbc\xaf\x27\x1c\x00\x04", "7z"),
            (b"SQLite format 3\x00\x10\x00", "sqlite3"),
            (b"\x89PNG\r\n\x1a\n\x00", "png"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", "jpeg"),
            (b"\xff\xd8\xff\xe1\x00\x10Exif", "jpeg"),
            (b"GIF89a\x01\x00", "gif"),
            (b"GIF87a\x01\x00", "gif"),
            (b"BM\x36\x00\x00\x00", "bmp"),
            (b"%PDF-1.7\n", "pdf"),
        ],
    )
    def test_known_formats(self, prefix, expected):
        """Test every table entry family is recognized."""
        assert detect_format(prefix) == expected
        assert classify(prefix) is True

    def test_three_byte_prefix_is_never_binary(self):
        """Test fewer than 4 bytes are always treated as text."""
        assert classify(b"\x7fEL") is False
        assert classify(b"\x1f\x8b\x08") is False
        assert classify(b"BM") is False
        assert classify(b"") is False

    def test_plain_text_is_not_binary(self):
        """Test ordinary source code is not classified as binary."""
        assert classify(b"def main():\n    pass\n") is False
        assert detect_format(b"#!/bin/sh\necho hi\n") is None

    def test_table_is_data_driven(self):
        """Test signatures are plain (name, magic, offset) entries."""
        for signature in BINARY_SIGNATURES:
            assert isinstance(signature.magic, bytes)
            assert signature.offset >= 0


class TestPortableExecutable:
    """Test the two-step PE header check."""

    def test_mz_with_valid_pe_header(self):
        """Test MZ plus PE header at the pointed offset is binary."""
        assert detect_format(bytes(_pe_prefix(0x80))) == "pe"

    def test_mz_without_pe_header(self):
        """Test a bare 'MZ' text file is not classified as PE."""
        assert classify(b"MZ is a nice abbreviation\n") is False

    def test_pe_offset_outside_buffer(self):
        """Test a PE offset past the read buffer is ignored."""
        assert classify(bytes(_pe_prefix(0x200))) is False

    def test_pe_offset_pointer_not_in_buffer(self):
        """Test a buffer too short to hold the 0x3C pointer is not PE."""
        assert classify(b"MZ" + b"\x00" * 20) is False


class TestIsBinaryFile:
    """Test reading file prefixes from disk."""

    def test_elf_file_regardless_of_extension(self, tmp_path):
        """Test ELF content is binary even when named like text."""
        path = tmp_path / "notes.md"
        path.write_bytes(b"\x7fELF" + b"\x00" * 100)
        assert is_binary_file(path) is True

    def test_three_byte_file(self, tmp_path):
        """Test a 3-byte file is never binary."""
        path = tmp_path / "tiny"
        path.write_bytes(b"\x7fEL")
        assert is_binary_file(path) is False

    def test_empty_file(self, tmp_path):
        """Test an empty file is text."""
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")
        assert is_binary_file(path) is False

    def test_missing_file_raises(self, tmp_path):
        """Test a read error is reported, not treated as text."""
        with pytest.raises(OSError):
            is_binary_file(tmp_path / "missing.bin")
