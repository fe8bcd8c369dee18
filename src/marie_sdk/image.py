"""
MARIE Memory Image
==================

A memory image is the assembler's output: an ordered sequence of 16-bit
words where index = address. It becomes the initial contents of machine
memory starting at address 0, and can be saved and loaded independently
of running the emulator.

File Format
-----------
Plain text, one word per line as 4 hex digits, in address order::

    # sum.hex - generated by masm
    1004
    3005
    2006
    7000

``#`` starts a comment. Blank lines are ignored. Hex digits may be
upper or lower case; writers always emit upper case.
"""

import logging
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Sequence

from marie_sdk.cpu import MEMORY_SIZE, WORD_MASK
from marie_sdk.errors import ImageFormatError

logger = logging.getLogger(__name__)

IMAGE_COMMENT = "#"


@dataclass(frozen=True)
class MemoryImage:
    """
    Immutable, ordered sequence of machine words.

    Attributes:
        words: Word values (0..0xFFFF), index = address

    Example:
        >>> image = MemoryImage.from_words([0x1002, 0x7000, 0x0005])
        >>> image[0]
        4098
        >>> print(image.to_text(), end="")
        1002
        7000
        0005
    """
    words: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if len(self.words) > MEMORY_SIZE:
            raise ImageFormatError(
                f"image holds {len(self.words)} words, memory holds {MEMORY_SIZE}"
            )
        for address, word in enumerate(self.words):
            if not 0 <= word <= WORD_MASK:
                raise ImageFormatError(
                    f"word {word!r} at address {address:03X} is not a 16-bit value"
                )

    @classmethod
    def from_words(cls, words: Sequence[int]) -> "MemoryImage":
        """Create an image from any sequence of word values."""
        return cls(tuple(words))

    def __len__(self) -> int:
        return len(self.words)

    def __getitem__(self, address: int) -> int:
        return self.words[address]

    def __iter__(self) -> Iterator[int]:
        return iter(self.words)

    # =========================================================================
    # Text Format
    # =========================================================================

    def to_text(self, header: Optional[str] = None) -> str:
        """
        Format the image as text, one 4-digit hex word per line.

        Args:
            header: Optional comment written as the first line
        """
        lines = []
        if header:
            lines.append(f"{IMAGE_COMMENT} {header}")
        lines.extend(f"{word:04X}" for word in self.words)
        return "\n".join(lines) + "\n" if lines else ""

    @classmethod
    def from_text(cls, text: str) -> "MemoryImage":
        """
        Parse the text format.

        Raises:
            ImageFormatError: If a line is not a 4-digit hex word
        """
        words = []
        for line_number, raw in enumerate(text.split("\n"), start=1):
            line = raw.split(IMAGE_COMMENT, 1)[0].strip()
            if not line:
                continue
            if len(line) != 4:
                raise ImageFormatError(f"expected 4 hex digits, got {line!r}", line_number)
            if not all(c in string.hexdigits for c in line):
                raise ImageFormatError(f"invalid hex word {line!r}", line_number)
            words.append(int(line, 16))
            if len(words) > MEMORY_SIZE:
                raise ImageFormatError(
                    f"image exceeds memory size ({MEMORY_SIZE} words)", line_number
                )
        return cls(tuple(words))

    def to_bytes(self) -> bytes:
        """Return the image as big-endian 16-bit words."""
        return b"".join(word.to_bytes(2, "big") for word in self.words)

    # =========================================================================
    # File I/O
    # =========================================================================

    def write(self, filepath: str | Path, header: Optional[str] = None) -> None:
        """Write the image to a text file."""
        Path(filepath).write_text(self.to_text(header))
        logger.debug(f"Wrote {len(self.words)} words to {filepath}")

    @classmethod
    def read(cls, filepath: str | Path) -> "MemoryImage":
        """
        Read an image from a text file.

        Raises:
            FileNotFoundError: If the file does not exist
            ImageFormatError: If the file is malformed
        """
        image = cls.from_text(Path(filepath).read_text())
        logger.debug(f"Read {len(image)} words from {filepath}")
        return image
