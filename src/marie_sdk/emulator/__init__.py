"""
MARIE Emulator
==============

A simulator for the MARIE teaching machine: one accumulator, a 16-bit
word, 4-bit opcodes, 12-bit addresses and 4096 words of memory shared by
code and data.

Quick Start
-----------

Basic usage::

    >>> from marie_sdk.emulator import Emulator, ScriptedConsole, BreakReason
    >>> emu = Emulator(console=ScriptedConsole(["5"]))
    >>> emu.load_source('''
    ...         Input
    ...         Add One
    ...         Output
    ...         Halt
    ... One,    DEC 1
    ... ''')
    >>> emu.run().reason == BreakReason.HALTED
    True
    >>> emu.console.output
    ['0006']

Module Structure
----------------

- `emulator.py`: Emulator class and EmulatorConfig (high-level API)
- `cpu.py`: Registers, fetch-decode-execute cycle, instruction semantics
- `memory.py`: 4096-word memory
- `console.py`: Console collaborators for Input/Output/Dump
- `events.py`: Run outcomes (BreakEvent, BreakReason)
"""

from .cpu import MarieCPU, CPUState
from .memory import Memory
from .console import ConsoleProtocol, StreamConsole, ScriptedConsole
from .events import BreakEvent, BreakReason
from .emulator import Emulator, EmulatorConfig

__all__ = [
    "Emulator",
    "EmulatorConfig",
    "MarieCPU",
    "CPUState",
    "Memory",
    "ConsoleProtocol",
    "StreamConsole",
    "ScriptedConsole",
    "BreakEvent",
    "BreakReason",
]
