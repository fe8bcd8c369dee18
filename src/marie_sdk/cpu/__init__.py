"""
MARIE SDK CPU Package
=====================

This package contains the MARIE architecture definitions used by both
the assembler (which encodes instructions) and the emulator (which
decodes and executes them).

Modules:
    marie: Opcodes, mnemonic table, operand forms, word helpers and a
           single-word disassembler.

Usage:
    from marie_sdk.cpu import Opcode, encode_instruction, disassemble_word
"""

from marie_sdk.cpu.marie import (
    # Machine constants
    WORD_BITS,
    WORD_MASK,
    OPERAND_MASK,
    OPCODE_SHIFT,
    WORD_MIN,
    WORD_MAX,
    MEMORY_SIZE,
    # Core types
    Opcode,
    OperandForm,
    InstructionInfo,
    # Instruction database
    INSTRUCTION_TABLE,
    MNEMONICS,
    MNEMONIC_BY_OPCODE,
    DIRECTIVES,
    SKIP_IF_NEGATIVE,
    SKIP_IF_ZERO,
    SKIP_IF_POSITIVE,
    # Lookup functions
    get_instruction_info,
    is_valid_instruction,
    mnemonics_for_form,
    # Word helpers
    to_signed,
    encode_instruction,
    decode_instruction,
    disassemble_word,
)

__all__ = [
    "WORD_BITS",
    "WORD_MASK",
    "OPERAND_MASK",
    "OPCODE_SHIFT",
    "WORD_MIN",
    "WORD_MAX",
    "MEMORY_SIZE",
    "Opcode",
    "OperandForm",
    "InstructionInfo",
    "INSTRUCTION_TABLE",
    "MNEMONICS",
    "MNEMONIC_BY_OPCODE",
    "DIRECTIVES",
    "SKIP_IF_NEGATIVE",
    "SKIP_IF_ZERO",
    "SKIP_IF_POSITIVE",
    "get_instruction_info",
    "is_valid_instruction",
    "mnemonics_for_form",
    "to_signed",
    "encode_instruction",
    "decode_instruction",
    "disassemble_word",
]
