"""
MARIE SDK Error Hierarchy
=========================

This module defines the exception hierarchy for the entire MARIE SDK.
All exceptions inherit from MarieError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
MarieError (base)
├── AssemblerError (assembler-related)
│   ├── LexicalError - unrecognized token in a source line
│   ├── AssemblySyntaxError - token pattern / opcode mismatch, bad literal
│   │   └── UndefinedSymbolError - reference to undefined label
│   ├── DuplicateSymbolError - label defined multiple times
│   └── CapacityError - program does not fit in machine memory
├── ImageFormatError - malformed memory image file
└── MachineError (runtime)
    ├── MachineFault - fatal condition raised by an instruction
    └── MemoryFault - address outside machine memory

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
             ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MarieError(Exception):
    """
    Base exception for all MARIE SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            assembler.assemble_file("program.mas")
        except MarieError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(MarieError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line_number(self) -> Optional[int]:
        """1-based source line number, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            sum.mas:4:9: error: undefined symbol 'Totl'
                    Store Totl
                          ^
            hint: did you mean 'Total'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(AssemblerError):
    """
    A piece of a source line matched no token class.

    Examples:
        - Punctuation other than ',' (``Load X;``)
        - Identifiers with underscores (``my_var``)
        - Hex literals with a ``0x`` prefix (``HEX 0x10``)
    """

    def __init__(
        self,
        lexeme: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.lexeme = lexeme
        super().__init__(
            f"unrecognized token '{lexeme}'",
            location=location,
            source_line=source_line,
        )


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised during pass 2 when a line's token pattern does not match any
    statement form, when an instruction is used with the wrong operand
    form, or when a numeric literal does not fit a word.

    Examples:
        - ``Halt X`` (Halt takes no operand)
        - ``Load`` (Load needs an address)
        - ``DEC 40000`` (out of range)
    """
    pass


class UndefinedSymbolError(AssemblySyntaxError):
    """
    Reference to an undefined label.

    Raised during the second pass of assembly when an operand names a
    label that no line defines. Undefined labels never resolve to
    address 0.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined multiple times.

    Includes the location of the original definition in the hint.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class CapacityError(AssemblerError):
    """
    The assembled program does not fit in machine memory.

    Reported before any execution is attempted.
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"program too long: {size} words (memory holds {capacity})",
        )


# =============================================================================
# Memory Image Exceptions
# =============================================================================

class ImageFormatError(MarieError):
    """
    Invalid memory image file.

    Raised when reading an image that contains a line that is not a
    4-digit hex word, or that holds more words than memory.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


# =============================================================================
# Runtime Exceptions
# =============================================================================

class MachineError(MarieError):
    """Base exception for errors raised while the machine is running."""
    pass


class MachineFault(MachineError):
    """
    Fatal runtime condition.

    Raised by an instruction handler (e.g. Skipcond with condition
    field 3) and converted by the run loop into a FAULT event, so it
    never escapes Emulator.run().

    Attributes:
        ir: Instruction register value at the time of the fault
        address: Address of the faulting instruction
    """

    def __init__(self, message: str, ir: Optional[int] = None,
                 address: Optional[int] = None):
        self.ir = ir
        self.address = address
        if ir is not None:
            message = f"{message} (IR={ir:04X})"
        super().__init__(message)


class MemoryFault(MachineError):
    """Memory access outside the 4096-word address space."""

    def __init__(self, address: int, access: str = "read"):
        self.address = address
        self.access = access
        super().__init__(f"memory {access} out of range: address {address:#x}")
