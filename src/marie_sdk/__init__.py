"""
MARIE SDK - Assembler and Simulator for the MARIE Teaching Machine
==================================================================

This package provides a toolchain for the MARIE architecture described in
"The Essentials of Computer Organization and Architecture" (Null & Lobur):
a single-accumulator machine with a 16-bit word, 4-bit opcodes, 12-bit
addresses and 4096 words of memory shared by code and data.

Main Components
---------------
- **assembler**: Two-pass assembler (masm)
    Converts MARIE source (.mas) into a memory image (.hex)

- **emulator**: Fetch-decode-execute simulator (mrun)
    Runs images with Input/Output on a pluggable console

- **cpu**: Instruction set definitions shared by both

Quick Start
-----------
Assemble and run a program:
    >>> from marie_sdk import Assembler, Emulator
    >>> image = Assembler().assemble_file("sum.mas")
    >>> emu = Emulator()
    >>> emu.load_image(image)
    >>> event = emu.run()

Or use the command-line tools:
    $ masm sum.mas -o sum.hex -l sum.lst
    $ mrun sum.hex --registers
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from marie_sdk.assembler import Assembler, assemble, assemble_file
from marie_sdk.image import MemoryImage
from marie_sdk.emulator import (
    Emulator,
    EmulatorConfig,
    BreakEvent,
    BreakReason,
    ScriptedConsole,
    StreamConsole,
)
from marie_sdk.errors import (
    MarieError,
    AssemblerError,
    LexicalError,
    AssemblySyntaxError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    CapacityError,
    ImageFormatError,
    MachineError,
    MachineFault,
    MemoryFault,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "MemoryImage",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "BreakEvent",
    "BreakReason",
    "ScriptedConsole",
    "StreamConsole",
    # Exception hierarchy
    "MarieError",
    "AssemblerError",
    "LexicalError",
    "AssemblySyntaxError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "CapacityError",
    "ImageFormatError",
    "MachineError",
    "MachineFault",
    "MemoryFault",
]
