"""
MARIE Memory Unit Tests
=======================

Tests for the 4096-word memory: bounds checking, word wrapping, loading
and hex dump formatting.
"""

import pytest

from marie_sdk.emulator import Memory
from marie_sdk.errors import MemoryFault


@pytest.fixture
def memory():
    """Create a fresh 4096-word memory."""
    return Memory()


class TestReadWrite:
    """Test basic word access."""

    def test_initially_zero(self, memory):
        assert len(memory) == 4096
        assert memory.read(0) == 0
        assert memory.read(0xFFF) == 0

    def test_write_read(self, memory):
        memory.write(0x123, 0xBEEF)
        assert memory.read(0x123) == 0xBEEF

    def test_write_wraps_to_16_bits(self, memory):
        memory.write(0, 0x12345)
        assert memory.read(0) == 0x2345
        memory.write(1, -1)
        assert memory.read(1) == 0xFFFF

    def test_indexing(self, memory):
        memory[5] = 7
        assert memory[5] == 7

    def test_read_out_of_range(self, memory):
        with pytest.raises(MemoryFault) as exc_info:
            memory.read(0x1000)
        assert exc_info.value.address == 0x1000
        assert exc_info.value.access == "read"

    def test_write_out_of_range(self, memory):
        with pytest.raises(MemoryFault, match="memory write out of range"):
            memory.write(-1, 0)

    def test_clear(self, memory):
        memory.write(10, 1)
        memory.clear()
        assert memory.read(10) == 0


class TestLoad:
    """Test bulk loading."""

    def test_load_at_zero(self, memory):
        assert memory.load([1, 2, 3]) == 3
        assert memory.read_range(0, 4) == [1, 2, 3, 0]

    def test_load_at_offset(self, memory):
        memory.load([0xAA, 0xBB], address=0x100)
        assert memory.read_range(0x100, 2) == [0xAA, 0xBB]

    def test_load_past_end(self, memory):
        with pytest.raises(MemoryFault):
            memory.load([1, 2], address=0xFFF)


class TestHexDump:
    """Test hex dump formatting."""

    def test_single_row(self, memory):
        memory.load([0x1004, 0x3005, 0x2006, 0x7000])
        assert memory.hex_dump(0, 3) == ["000: 1004 3005 2006 7000"]

    def test_multiple_rows(self, memory):
        memory.load(range(10))
        rows = memory.hex_dump(0, 9)
        assert rows == [
            "000: 0000 0001 0002 0003 0004 0005 0006 0007",
            "008: 0008 0009",
        ]

    def test_end_is_clamped(self, memory):
        rows = memory.hex_dump(0xFF8, 0x2000)
        assert rows == ["FF8: 0000 0000 0000 0000 0000 0000 0000 0000"]

    def test_custom_row_width(self, memory):
        assert memory.hex_dump(0, 3, words_per_row=2) == [
            "000: 0000 0000",
            "002: 0000 0000",
        ]
