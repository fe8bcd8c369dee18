"""
MARIE Assembler
===============

This package provides the two-pass assembler for MARIE assembly language.
It converts mnemonic source text into a MemoryImage that the emulator
loads at address 0.

Main Components
---------------
- **Lexer**: Splits one source line into classified tokens
- **SymbolResolver**: Pass 1, assigns addresses and binds labels
- **CodeGenerator**: Pass 2, encodes each line into a 16-bit word
- **Assembler**: Runs both passes and writes images, listings and symbols

Source Format
-------------
One statement per line, with an optional ``Label,`` prefix::

    Loop,   Load Cnt        / comments start with '/'
            Subt One
            Store Cnt
            Skipcond 400    / skip when AC = 0
            Jump Loop
            Halt
    Cnt,    DEC 3
    One,    DEC 1

Operand numbers are hex; ``DEC`` and ``HEX`` directives reserve one word
initialised to a decimal or hex literal.
"""

from marie_sdk.assembler.assembler import Assembler, assemble, assemble_file
from marie_sdk.assembler.lexer import Lexer, Token, TokenType, split_lines, tokenize
from marie_sdk.assembler.symbols import Symbol, SymbolResolver
from marie_sdk.assembler.codegen import CodeGenerator, ListingEntry

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "split_lines",
    # Pass 1
    "Symbol",
    "SymbolResolver",
    # Pass 2
    "CodeGenerator",
    "ListingEntry",
]
