"""
MARIE Assembler - Pass 2 (Code Generation)
==========================================

The second pass re-tokenizes every line, drops a ``Label,`` prefix and
matches the remaining tokens against the statement forms below. Each
matching line emits exactly one 16-bit word, in source order.

Statement Forms
---------------
| Tokens                 | Instructions                     | Word                         |
|------------------------|----------------------------------|------------------------------|
| (none)                 | -                                | nothing                      |
| INSTRUCTION            | Input, Output, Halt, Clear,      | opcode << 12                 |
|                        | Skipcond                         |                              |
| INSTRUCTION IDENTIFIER | JnS, Load, Store, Add, Subt,     | opcode << 12 | label address |
|                        | Skipcond, Jump, AddI, JumpI,     |                              |
|                        | LoadI, StoreI, Dump              |                              |
| INSTRUCTION NUMBER     | (as above)                       | opcode << 12 | hex & 0xFFF   |
| DIRECTIVE NUMBER       | DEC (base 10), HEX (base 16)     | the literal                  |

Any other shape is a syntax error. Literals that do not fit a word are
errors, never wrapped. Labels missing from the symbol table are errors,
never address 0.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from marie_sdk.assembler.lexer import Lexer, Token, TokenType, split_label, token_types
from marie_sdk.assembler.symbols import SymbolResolver
from marie_sdk.cpu import (
    DIRECTIVES,
    WORD_MAX,
    WORD_MIN,
    WORD_MASK,
    OperandForm,
    disassemble_word,
    encode_instruction,
    get_instruction_info,
    mnemonics_for_form,
)
from marie_sdk.errors import AssemblySyntaxError, SourceLocation, UndefinedSymbolError

logger = logging.getLogger(__name__)


# =============================================================================
# Literal Ranges
# =============================================================================
# A decimal literal is a signed value. A hex literal names a bit pattern, so
# it may be written either signed (-8000) or unsigned (FFFF).
# =============================================================================

DECIMAL_RANGE = (WORD_MIN, WORD_MAX)     # -32768 .. 32767
HEX_RANGE = (WORD_MIN, WORD_MASK)        # -0x8000 .. 0xFFFF

# Operand numbers are always written in hex
OPERAND_BASE = 16


# =============================================================================
# Listing Entry
# =============================================================================

@dataclass(frozen=True)
class ListingEntry:
    """
    One emitted word and the source line that produced it.

    Attributes:
        address: Address of the word
        word: The emitted 16-bit value
        line_number: Source line (1-based)
        source: Source line text
        is_data: True for DEC/HEX words
    """
    address: int
    word: int
    line_number: int
    source: str
    is_data: bool = False

    def __str__(self) -> str:
        text = "" if self.is_data else disassemble_word(self.word)
        return f"{self.address:03X}   {self.word:04X}  {text:<22s}{self.line_number:5d}  {self.source}"


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates MARIE machine words from source lines (pass 2).

    The code generator reads the symbol table built by pass 1 and never
    modifies it.

    Usage:
        resolver = SymbolResolver()
        resolver.resolve(lines)
        codegen = CodeGenerator(resolver)
        words = codegen.generate(lines)
    """

    def __init__(self, resolver: SymbolResolver):
        self._resolver = resolver
        self._words: list[int] = []
        self._listing: list[ListingEntry] = []
        self._filename = "<input>"

    def generate(self, lines: list[str], filename: str = "<input>") -> list[int]:
        """
        Encode every code-producing line.

        Args:
            lines: Source lines (without line terminators)
            filename: Name used in error locations

        Returns:
            Emitted words in address order

        Raises:
            LexicalError: If a line cannot be tokenized
            AssemblySyntaxError: If a line is not a valid statement
            UndefinedSymbolError: If an operand names an unknown label
        """
        self._words.clear()
        self._listing.clear()
        self._filename = filename

        for line_number, line in enumerate(lines, start=1):
            tokens = Lexer(line, filename, line_number).tokenize()
            word = self._encode_line(tokens, line_number, line)
            if word is None:
                continue

            address = len(self._words)
            self._words.append(word)
            is_data = bool(tokens) and split_label(tokens)[1][0].type == TokenType.DIRECTIVE
            self._listing.append(ListingEntry(address, word, line_number, line, is_data))
            logger.debug(f"Pass 2: {address:03X} {word:04X}  {line.strip()}")

        return list(self._words)

    def get_words(self) -> list[int]:
        """Return the words emitted by the last generate() call."""
        return list(self._words)

    def get_listing_entries(self) -> list[ListingEntry]:
        """Return one ListingEntry per emitted word."""
        return list(self._listing)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Listing showing addresses, words, disassembly and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("MARIE Assembler Listing")
        lines.append("=" * 72)
        lines.append("")
        lines.append("Addr  Word  Instruction            Line  Source")
        lines.append("-" * 72)
        lines.extend(str(entry) for entry in self._listing)
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, sym in sorted(self._resolver.symbols.items()):
            lines.append(f"{name:20s} = {sym.address:03X}")
        return "\n".join(lines) + "\n"

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing to a file."""
        Path(filepath).write_text(self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by masm\n")
            for name, sym in sorted(self._resolver.symbols.items()):
                f.write(f"{name} {sym.address:03X}\n")

    # =========================================================================
    # Statement Encoding
    # =========================================================================

    def _encode_line(self, tokens: list[Token], line_number: int, line: str) -> int | None:
        """Encode one tokenized line; None for lines that emit nothing."""
        label, tokens = split_label(tokens)

        match token_types(tokens):
            case ():
                if label is not None:
                    raise self._syntax_error(
                        f"label '{label.text}' is not followed by a statement",
                        label, line,
                        hint="put the label on the same line as an instruction or DEC/HEX",
                    )
                return None

            case (TokenType.INSTRUCTION,):
                return self._encode_inherent(tokens[0], line)

            case (TokenType.INSTRUCTION, TokenType.IDENTIFIER):
                address = self._resolve_symbol(tokens[1], line)
                return self._encode_address(tokens[0], address, line)

            case (TokenType.INSTRUCTION, TokenType.NUMBER):
                value = self._parse_literal(tokens[1], OPERAND_BASE, HEX_RANGE, line)
                return self._encode_address(tokens[0], value, line)

            case (TokenType.DIRECTIVE, TokenType.NUMBER):
                base = DIRECTIVES[tokens[0].text]
                value_range = DECIMAL_RANGE if base == 10 else HEX_RANGE
                value = self._parse_literal(tokens[1], base, value_range, line)
                return value & WORD_MASK

            case (TokenType.DIRECTIVE,):
                raise self._syntax_error(
                    f"{tokens[0].text} needs a value", tokens[0], line,
                )

            case _:
                raise self._reject(tokens, line)

    def _reject(self, tokens: list[Token], line: str) -> AssemblySyntaxError:
        """Build the error for a token sequence that matches no statement form."""
        first = tokens[0]
        if first.type not in (TokenType.INSTRUCTION, TokenType.DIRECTIVE):
            return self._syntax_error(
                f"unexpected {_describe(first)}", first, line,
                hint="a statement starts with an instruction, DEC or HEX",
            )

        if first.type == TokenType.INSTRUCTION:
            operand_types = (TokenType.IDENTIFIER, TokenType.NUMBER)
        else:
            operand_types = (TokenType.NUMBER,)

        if tokens[1].type in operand_types:
            return self._syntax_error(
                f"too many operands for '{first.text}'", tokens[2], line,
            )
        return self._syntax_error(
            f"'{first.text}' cannot take {_describe(tokens[1])} as operand",
            tokens[1], line,
        )

    def _encode_inherent(self, token: Token, line: str) -> int:
        info = get_instruction_info(token.text)
        if OperandForm.INHERENT not in info.forms:
            raise self._syntax_error(
                f"'{token.text}' requires an address operand", token, line,
                hint=f"write e.g. '{token.text} X' or '{token.text} 10'",
            )
        return encode_instruction(info.opcode)

    def _encode_address(self, token: Token, operand: int, line: str) -> int:
        info = get_instruction_info(token.text)
        if OperandForm.ADDRESS not in info.forms:
            allowed = ", ".join(mnemonics_for_form(OperandForm.INHERENT))
            raise self._syntax_error(
                f"'{token.text}' takes no operand", token, line,
                hint=f"instructions without operands: {allowed}",
            )
        return encode_instruction(info.opcode, operand)

    def _resolve_symbol(self, token: Token, line: str) -> int:
        address = self._resolver.address_of(token.text)
        if address is None:
            raise UndefinedSymbolError(
                token.text,
                location=token.location,
                source_line=line,
                similar_symbols=self._resolver.similar_symbols(token.text),
            )
        return address

    def _parse_literal(self, token: Token, base: int, value_range: tuple[int, int],
                       line: str) -> int:
        """Parse a NUMBER token in the given base and range-check it."""
        try:
            value = int(token.text, base)
        except ValueError:
            kind = "decimal" if base == 10 else "hex"
            raise self._syntax_error(
                f"invalid {kind} literal '{token.text}'", token, line,
            ) from None

        low, high = value_range
        if not low <= value <= high:
            raise self._syntax_error(
                f"literal '{token.text}' out of range", token, line,
                hint=f"value must be between {low} and {high}",
            )
        return value

    def _syntax_error(self, message: str, token: Token, line: str,
                      hint: str | None = None) -> AssemblySyntaxError:
        return AssemblySyntaxError(
            message,
            location=SourceLocation(self._filename, token.line, token.column),
            hint=hint,
            source_line=line,
        )


def _describe(token: Token) -> str:
    """Describe a token for error messages, e.g. "identifier 'Loop'"."""
    return f"{token.type.name.lower()} '{token.text}'"
