"""
MARIE Assembly Language Lexer
=============================

This module implements the lexer (tokenizer) for MARIE assembly language.
MARIE source is strictly line oriented, so the lexer works on one line at
a time and returns the tokens of that line.

Token Types
-----------
- INSTRUCTION: A known mnemonic (Load, Store, JnS, ...)
- DIRECTIVE: DEC or HEX
- NUMBER: Optionally signed run of hex digits (base decided by context)
- IDENTIFIER: Label names, ``[A-Za-z][A-Za-z0-9]*``
- COMMA: ``,`` separating a label from its statement

Classification is first-match in the order listed, so ``Add`` is an
instruction (not the hex number $ADD) and ``DEC`` is a directive. A bare
NUMBER is ambiguous between decimal and hex: instruction operands are
always hex, directive values use the directive's base.

Comments
--------
A ``/`` starts a comment that runs to the end of the line.

Example
-------
>>> from marie_sdk.assembler.lexer import tokenize
>>> tokenize("Loop, Load Cnt / fetch counter")
[Token(IDENTIFIER, 'Loop', 1:1), Token(COMMA, ',', 1:5), \
Token(INSTRUCTION, 'Load', 1:7), Token(IDENTIFIER, 'Cnt', 1:12)]
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from marie_sdk.cpu import MNEMONICS, DIRECTIVES
from marie_sdk.errors import LexicalError, SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Lexical classes of MARIE assembly, in classification order."""
    INSTRUCTION = auto()
    DIRECTIVE = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    COMMA = auto()


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from a source line.

    Attributes:
        type: The TokenType classification
        text: The lexeme exactly as written
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    text: str
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

COMMENT_MARKER = "/"

NUMBER_PATTERN = re.compile(r"[-+]?[0-9A-Fa-f]+")
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9]*")

# A piece is either a lone comma or a run of anything but whitespace/commas
_PIECE_PATTERN = re.compile(r",|[^\s,]+")


def classify(lexeme: str) -> TokenType | None:
    """
    Classify a single lexeme, or return None if it matches no token type.

    Precedence: instruction, directive, number, identifier, comma.
    """
    if lexeme in MNEMONICS:
        return TokenType.INSTRUCTION
    if lexeme in DIRECTIVES:
        return TokenType.DIRECTIVE
    if NUMBER_PATTERN.fullmatch(lexeme):
        return TokenType.NUMBER
    if IDENTIFIER_PATTERN.fullmatch(lexeme):
        return TokenType.IDENTIFIER
    if lexeme == ",":
        return TokenType.COMMA
    return None


class Lexer:
    """
    Tokenizes one line of MARIE assembly source.

    The lexer is pure: it keeps no state between lines, so each pass of
    the assembler simply re-tokenizes the lines it walks.

    Usage:
        lexer = Lexer("Loop, Load Cnt", "prog.mas", line_number=3)
        tokens = lexer.tokenize()

    Attributes:
        source: The source line being tokenized
        filename: Name of the source file (for error reporting)
        line_number: 1-based line number of this line in its file
    """

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        self.source = source
        self.filename = filename
        self.line_number = line_number

    def tokenize(self) -> list[Token]:
        """
        Split the line into classified tokens.

        Returns:
            Ordered token list; empty for blank or comment-only lines

        Raises:
            LexicalError: If a piece of the line matches no token type
        """
        code = self.source.split(COMMENT_MARKER, 1)[0]
        tokens = []

        for match in _PIECE_PATTERN.finditer(code):
            lexeme = match.group()
            column = match.start() + 1
            token_type = classify(lexeme)
            if token_type is None:
                raise LexicalError(
                    lexeme,
                    location=SourceLocation(self.filename, self.line_number, column),
                    source_line=self.source.rstrip("\r\n"),
                )
            tokens.append(Token(token_type, lexeme, self.line_number, column, self.filename))

        return tokens


def split_lines(source: str) -> list[str]:
    """
    Split source text into lines.

    Only a newline ends a line (a trailing carriage return is dropped), so
    form feeds and other Unicode line separators stay inside their line.
    """
    return [line.removesuffix("\r") for line in source.split("\n")]


def tokenize(line: str, filename: str = "<input>", line_number: int = 1) -> list[Token]:
    """Convenience wrapper: tokenize a single source line."""
    return Lexer(line, filename, line_number).tokenize()


def token_types(tokens: list[Token]) -> tuple[TokenType, ...]:
    """Return the shape of a token list, used for pattern matching statements."""
    return tuple(t.type for t in tokens)


def split_label(tokens: list[Token]) -> tuple[Token | None, list[Token]]:
    """
    Separate a leading ``Label,`` prefix from the rest of a line.

    Returns:
        (label token or None, remaining tokens)
    """
    if token_types(tokens[:2]) == (TokenType.IDENTIFIER, TokenType.COMMA):
        return tokens[0], tokens[2:]
    return None, tokens
