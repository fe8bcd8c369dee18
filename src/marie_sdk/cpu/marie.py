"""
MARIE Instruction Set Definition
================================

This module defines the MARIE instruction set: opcodes, mnemonics,
operand forms and the word layout shared by the assembler (which encodes
instructions) and the emulator (which decodes them).

Word Layout
-----------
Every word is 16 bits wide::

    15    12 11                     0
    +-------+------------------------+
    |opcode |   operand / address    |
    +-------+------------------------+

Words are stored as 16-bit patterns (0..0xFFFF). Where a sign matters
(Skipcond comparisons, Input range checks) a word is read as 16-bit
two's complement. Arithmetic wraps modulo 2^16.

Operand Forms
-------------
1. **INHERENT**: No operand (Input, Output, Halt, Clear)
   - Example: ``Halt`` -> $7000

2. **ADDRESS**: 12-bit address or immediate (Load, Store, Jump, ...)
   - Example: ``Load 00A`` -> $100A

Skipcond appears in both forms: bare ``Skipcond`` encodes condition 0.

Reference
---------
- Null & Lobur, "The Essentials of Computer Organization and
  Architecture", chapter 4 (MARIE)
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

WORD_BITS = 16
WORD_MASK = 0xFFFF
OPERAND_MASK = 0x0FFF
OPCODE_SHIFT = 12

# Signed interpretation of a word
WORD_MIN = -(1 << (WORD_BITS - 1))      # -32768
WORD_MAX = (1 << (WORD_BITS - 1)) - 1   # 32767

# 12-bit addressing
MEMORY_SIZE = 1 << 12                   # 4096 words


# =============================================================================
# Opcode Enumeration
# =============================================================================

class Opcode(IntEnum):
    """
    MARIE opcodes. The value is the high nibble of the instruction word.

    Do not re-order: values are fixed by the architecture.
    """
    JNS = 0x0
    LOAD = 0x1
    STORE = 0x2
    ADD = 0x3
    SUBT = 0x4
    INPUT = 0x5
    OUTPUT = 0x6
    HALT = 0x7
    SKIPCOND = 0x8
    JUMP = 0x9
    CLEAR = 0xA
    ADDI = 0xB
    JUMPI = 0xC
    LOADI = 0xD
    STOREI = 0xE
    DUMP = 0xF  # diagnostic extension


class OperandForm(Enum):
    """How an instruction's low 12 bits are supplied in source."""
    INHERENT = auto()   # No operand
    ADDRESS = auto()    # Label or hex number

    def __str__(self) -> str:
        return {
            OperandForm.INHERENT: "no operand",
            OperandForm.ADDRESS: "an address operand",
        }[self]


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Information about a MARIE instruction.

    Attributes:
        mnemonic: Source spelling (case-sensitive)
        opcode: The 4-bit opcode
        forms: Operand forms accepted by the assembler
    """
    mnemonic: str
    opcode: Opcode
    forms: frozenset[OperandForm]

    def __repr__(self) -> str:
        return f"InstructionInfo({self.mnemonic}, opcode=${self.opcode:X})"


_INHERENT = frozenset({OperandForm.INHERENT})
_ADDRESS = frozenset({OperandForm.ADDRESS})

# Master instruction table, keyed by mnemonic.
# Mnemonics are exact, case-sensitive matches.
INSTRUCTION_TABLE: dict[str, InstructionInfo] = {
    "JnS":      InstructionInfo("JnS", Opcode.JNS, _ADDRESS),
    "Load":     InstructionInfo("Load", Opcode.LOAD, _ADDRESS),
    "Store":    InstructionInfo("Store", Opcode.STORE, _ADDRESS),
    "Add":      InstructionInfo("Add", Opcode.ADD, _ADDRESS),
    "Subt":     InstructionInfo("Subt", Opcode.SUBT, _ADDRESS),
    "Input":    InstructionInfo("Input", Opcode.INPUT, _INHERENT),
    "Output":   InstructionInfo("Output", Opcode.OUTPUT, _INHERENT),
    "Halt":     InstructionInfo("Halt", Opcode.HALT, _INHERENT),
    "Skipcond": InstructionInfo(
        "Skipcond", Opcode.SKIPCOND, _INHERENT | _ADDRESS
    ),
    "Jump":     InstructionInfo("Jump", Opcode.JUMP, _ADDRESS),
    "Clear":    InstructionInfo("Clear", Opcode.CLEAR, _INHERENT),
    "AddI":     InstructionInfo("AddI", Opcode.ADDI, _ADDRESS),
    "JumpI":    InstructionInfo("JumpI", Opcode.JUMPI, _ADDRESS),
    "LoadI":    InstructionInfo("LoadI", Opcode.LOADI, _ADDRESS),
    "StoreI":   InstructionInfo("StoreI", Opcode.STOREI, _ADDRESS),
    "Dump":     InstructionInfo("Dump", Opcode.DUMP, _ADDRESS),
}

MNEMONICS: frozenset[str] = frozenset(INSTRUCTION_TABLE)

# Reverse lookup for the disassembler
MNEMONIC_BY_OPCODE: dict[Opcode, str] = {
    info.opcode: name for name, info in INSTRUCTION_TABLE.items()
}

# Data directives and the base their literal is written in
DIRECTIVES: dict[str, int] = {
    "DEC": 10,
    "HEX": 16,
}

# Skipcond condition field (operand bits 11-10)
SKIP_IF_NEGATIVE = 0
SKIP_IF_ZERO = 1
SKIP_IF_POSITIVE = 2
SKIPCOND_NAMES = {
    SKIP_IF_NEGATIVE: "AC<0",
    SKIP_IF_ZERO: "AC=0",
    SKIP_IF_POSITIVE: "AC>0",
}


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up instruction information by mnemonic.

    Args:
        mnemonic: The instruction mnemonic (case-sensitive, e.g. "Load")

    Returns:
        InstructionInfo if found, None otherwise
    """
    return INSTRUCTION_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a string is exactly a MARIE mnemonic."""
    return mnemonic in MNEMONICS


def mnemonics_for_form(form: OperandForm) -> list[str]:
    """List mnemonics accepting an operand form, in opcode order."""
    infos = sorted(INSTRUCTION_TABLE.values(), key=lambda i: i.opcode)
    return [i.mnemonic for i in infos if form in i.forms]


# =============================================================================
# Word Helpers
# =============================================================================

def to_signed(word: int) -> int:
    """Interpret a 16-bit pattern as two's complement."""
    word &= WORD_MASK
    return word - (1 << WORD_BITS) if word & 0x8000 else word


def encode_instruction(opcode: Opcode, operand: int = 0) -> int:
    """Pack an opcode and the low 12 bits of operand into a word."""
    return (int(opcode) << OPCODE_SHIFT) | (operand & OPERAND_MASK)


def decode_instruction(word: int) -> tuple[int, int]:
    """
    Split a word into (opcode, operand).

    The opcode is returned as a plain int so that callers decide how to
    treat values outside the Opcode enumeration.
    """
    word &= WORD_MASK
    return word >> OPCODE_SHIFT, word & OPERAND_MASK


def disassemble_word(word: int) -> str:
    """
    Render a word as MARIE assembly text.

    Inherent-only instructions print without an operand; everything else
    prints a 3-digit hex operand. Skipcond adds its condition as a hint.

    Example:
        >>> disassemble_word(0x100A)
        'Load 00A'
        >>> disassemble_word(0x8400)
        'Skipcond 400 ; AC=0'
    """
    opcode, operand = decode_instruction(word)
    mnemonic = MNEMONIC_BY_OPCODE[Opcode(opcode)]
    info = INSTRUCTION_TABLE[mnemonic]

    if OperandForm.ADDRESS not in info.forms:
        return mnemonic

    text = f"{mnemonic} {operand:03X}"
    if info.opcode == Opcode.SKIPCOND:
        condition = (operand >> 10) & 3
        text += f" ; {SKIPCOND_NAMES.get(condition, 'invalid')}"
    return text
