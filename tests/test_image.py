"""
Memory Image Tests
==================

Tests for MemoryImage construction, the hex text format and file I/O.
"""

import pytest

from marie_sdk.cpu import MEMORY_SIZE
from marie_sdk.errors import ImageFormatError
from marie_sdk.image import MemoryImage


# =============================================================================
# Construction Tests
# =============================================================================

class TestConstruction:
    """Test creating images from word lists."""

    def test_from_words(self):
        image = MemoryImage.from_words([0x1002, 0x7000, 0x0005])
        assert len(image) == 3
        assert image[0] == 0x1002
        assert list(image) == [0x1002, 0x7000, 0x0005]

    def test_empty(self):
        assert len(MemoryImage()) == 0

    def test_immutable(self):
        image = MemoryImage.from_words([1, 2])
        with pytest.raises(AttributeError):
            image.words = (3,)

    def test_equality(self):
        assert MemoryImage.from_words([1, 2]) == MemoryImage.from_words((1, 2))

    def test_rejects_out_of_range_word(self):
        with pytest.raises(ImageFormatError, match="not a 16-bit value"):
            MemoryImage.from_words([0x10000])
        with pytest.raises(ImageFormatError):
            MemoryImage.from_words([-1])

    def test_rejects_oversize(self):
        MemoryImage.from_words([0] * MEMORY_SIZE)
        with pytest.raises(ImageFormatError, match="memory holds 4096"):
            MemoryImage.from_words([0] * (MEMORY_SIZE + 1))

    def test_to_bytes(self):
        image = MemoryImage.from_words([0x1002, 0x00FF])
        assert image.to_bytes() == bytes([0x10, 0x02, 0x00, 0xFF])


# =============================================================================
# Text Format Tests
# =============================================================================

class TestTextFormat:
    """Test the one-word-per-line hex format."""

    def test_to_text(self):
        image = MemoryImage.from_words([0x1002, 0x7000, 0x000A])
        assert image.to_text() == "1002\n7000\n000A\n"

    def test_to_text_with_header(self):
        image = MemoryImage.from_words([0x7000])
        assert image.to_text(header="prog.mas") == "# prog.mas\n7000\n"

    def test_to_text_empty(self):
        assert MemoryImage().to_text() == ""

    def test_from_text(self):
        image = MemoryImage.from_text("1002\n7000\n000a\n")
        assert list(image) == [0x1002, 0x7000, 0x000A]

    def test_comments_and_blank_lines(self):
        text = "# header\n\n1002   # Load 002\n  7000\n\n"
        assert list(MemoryImage.from_text(text)) == [0x1002, 0x7000]

    def test_form_feed_in_comment_does_not_split_line(self):
        text = "7000 # a\x0cb\x85c\n0001\r\n"
        assert list(MemoryImage.from_text(text)) == [0x7000, 0x0001]

    def test_text_round_trip(self):
        image = MemoryImage.from_words([0xFFFF, 0x0000, 0x8400])
        assert MemoryImage.from_text(image.to_text(header="x")) == image

    def test_wrong_width(self):
        with pytest.raises(ImageFormatError) as exc_info:
            MemoryImage.from_text("1002\n700\n")
        assert exc_info.value.line == 2
        assert "expected 4 hex digits" in str(exc_info.value)

    def test_not_hex(self):
        with pytest.raises(ImageFormatError, match="line 1: invalid hex word 'XY12'"):
            MemoryImage.from_text("XY12\n")

    def test_sign_is_not_a_digit(self):
        with pytest.raises(ImageFormatError, match="invalid hex word"):
            MemoryImage.from_text("-001\n")

    def test_too_many_words(self):
        text = "0000\n" * (MEMORY_SIZE + 1)
        with pytest.raises(ImageFormatError) as exc_info:
            MemoryImage.from_text(text)
        assert exc_info.value.line == MEMORY_SIZE + 1


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFileIO:
    """Test writing and reading image files."""

    def test_write_and_read(self, tmp_path):
        image = MemoryImage.from_words([0x1002, 0x7000, 0x0005])
        path = tmp_path / "prog.hex"
        image.write(path, header="prog.mas - generated by masm")

        assert path.read_text().startswith("# prog.mas - generated by masm\n")
        assert MemoryImage.read(path) == image

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MemoryImage.read(tmp_path / "missing.hex")
