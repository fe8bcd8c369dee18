"""
Memory Subsystem for the MARIE Emulator
=======================================

MARIE has a single 4096-word memory holding both code and data. Every
cell is a 16-bit word. Addresses are 12 bits wide, so an instruction
operand can always reach every cell; only the PC running off the end of
memory or an indirect pointer holding a value above $FFF can address a
cell that does not exist, and both raise MemoryFault.
"""

from typing import Iterable

from marie_sdk.cpu import MEMORY_SIZE, WORD_MASK
from marie_sdk.errors import MemoryFault


class Memory:
    """
    Word-addressed memory.

    Values written are wrapped to 16 bits; reads return 0..0xFFFF.

    Attributes:
        size: Number of words
    """

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = [0] * size

    def read(self, address: int) -> int:
        """
        Read a word.

        Raises:
            MemoryFault: If address is outside memory
        """
        if not 0 <= address < self.size:
            raise MemoryFault(address, "read")
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write a word (wrapped to 16 bits).

        Raises:
            MemoryFault: If address is outside memory
        """
        if not 0 <= address < self.size:
            raise MemoryFault(address, "write")
        self._data[address] = value & WORD_MASK

    def clear(self) -> None:
        """Zero every cell."""
        self._data = [0] * self.size

    def load(self, words: Iterable[int], address: int = 0) -> int:
        """
        Copy words into memory starting at address.

        Returns:
            Number of words loaded

        Raises:
            MemoryFault: If the words do not fit
        """
        count = 0
        for offset, word in enumerate(words):
            self.write(address + offset, word)
            count += 1
        return count

    def read_range(self, start: int, count: int) -> list[int]:
        """Read count consecutive words starting at start."""
        return [self.read(address) for address in range(start, start + count)]

    def hex_dump(self, start: int = 0, end: int | None = None,
                 words_per_row: int = 8) -> list[str]:
        """
        Format memory as rows of hex words.

        Args:
            start: First address (inclusive)
            end: Last address (inclusive); defaults to the last cell
            words_per_row: Words shown on each row

        Returns:
            Lines like ``010: 1004 3005 2006 7000 0002 0003 0000 0000``
        """
        if end is None:
            end = self.size - 1
        end = min(end, self.size - 1)

        rows = []
        for row_start in range(start, end + 1, words_per_row):
            row_end = min(row_start + words_per_row - 1, end)
            words = " ".join(f"{w:04X}" for w in self._data[row_start:row_end + 1])
            rows.append(f"{row_start:03X}: {words}")
        return rows

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, address: int) -> int:
        return self.read(address)

    def __setitem__(self, address: int, value: int) -> None:
        self.write(address, value)
