"""
MARIE Assembler - Main Interface
================================

This module provides the main Assembler class, which is the primary
interface for assembling MARIE source code. It runs the two passes and
produces a MemoryImage ready to load into the emulator.

Example Usage
-------------
>>> from marie_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> image = asm.assemble_string('''
...         Load X      / AC <- X
...         Add Y
...         Store Z
...         Halt
... X,      DEC 2
... Y,      DEC 3
... Z,      DEC 0
... ''')
>>> len(image)
7
>>> asm.get_symbols()["Z"]
6

Command-Line Usage
------------------
    $ masm sum.mas -o sum.hex -l sum.lst -s sum.sym
"""

import logging
from pathlib import Path
from typing import Optional

from marie_sdk.assembler.codegen import CodeGenerator, ListingEntry
from marie_sdk.assembler.lexer import split_lines
from marie_sdk.assembler.symbols import SymbolResolver
from marie_sdk.cpu import MEMORY_SIZE
from marie_sdk.errors import AssemblerError, CapacityError
from marie_sdk.image import MemoryImage

logger = logging.getLogger(__name__)


class Assembler:
    """
    Two-pass MARIE assembler.

    Assembly is all-or-nothing: the first error raises and no image is
    kept, so a caller never sees a partially assembled program.

    Attributes:
        capacity: Maximum program length in words (machine memory size)
    """

    def __init__(self, capacity: int = MEMORY_SIZE):
        """
        Initialize the assembler.

        Args:
            capacity: Maximum number of words a program may occupy
        """
        self.capacity = capacity
        self._resolver = SymbolResolver(capacity)
        self._codegen = CodeGenerator(self._resolver)
        self._image: Optional[MemoryImage] = None
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> MemoryImage:
        """
        Assemble source code from a string.

        Args:
            source: MARIE assembly source
            filename: Virtual filename for error messages

        Returns:
            The assembled memory image

        Raises:
            AssemblerError: If assembly fails (lexical, syntax, undefined or
                            duplicate symbol, capacity)
        """
        self._image = None
        lines = split_lines(source)

        self._resolver.resolve(lines, filename)
        words = self._codegen.generate(lines, filename)

        if len(words) > self.capacity:
            raise CapacityError(len(words), self.capacity)

        self._image = MemoryImage.from_words(words)
        logger.info(
            f"Assembled {filename}: {len(words)} words, "
            f"{len(self._resolver.symbols)} symbols"
        )
        return self._image

    def assemble_file(self, filepath: str | Path) -> MemoryImage:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_image(self) -> MemoryImage:
        """
        Get the image produced by the last successful assembly.

        Raises:
            AssemblerError: If nothing has been assembled
        """
        if self._image is None:
            raise AssemblerError("no program has been assembled")
        return self._image

    def get_symbols(self) -> dict[str, int]:
        """Get the symbol table as name -> address."""
        return self._resolver.as_dict()

    def get_listing(self) -> str:
        """Get the assembly listing as a string."""
        return self._codegen.get_listing()

    def get_listing_entries(self) -> list[ListingEntry]:
        """Get one listing entry per emitted word."""
        return self._codegen.get_listing_entries()

    def write_image(self, filepath: str | Path) -> None:
        """Write the memory image in hex text format."""
        name = self._source_file.name if self._source_file else "<input>"
        self.get_image().write(filepath, header=f"{name} - generated by masm")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        self._codegen.write_listing(filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol table file."""
        self._codegen.write_symbols(filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> MemoryImage:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> MemoryImage:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
