"""
MARIE Assembler - Pass 1 (Symbol Resolution)
============================================

The first pass walks the source once, assigning each code-producing line
an address and binding ``Label,`` prefixes to the address of their line.

Pass 1 only does lexical and address accounting. It does not check that
instructions have legal operands; pass 2 is the single place where
statements are validated. It still tokenizes every line, so a lexical
error stops assembly here with the right line number.

Address Accounting
------------------
- A line with no tokens (blank or comment only) takes no address.
- Any other line takes exactly one address, labelled or not.
- Addresses start at 0 and follow source order.
"""

import logging
from dataclasses import dataclass

from marie_sdk.assembler.lexer import Lexer, split_label
from marie_sdk.cpu import MEMORY_SIZE
from marie_sdk.errors import CapacityError, DuplicateSymbolError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Symbol Table Entry
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label text (case-sensitive)
        address: Address of the word the label prefixes
        location: Where the label was defined
    """
    name: str
    address: int
    location: SourceLocation


# =============================================================================
# Symbol Resolver
# =============================================================================

class SymbolResolver:
    """
    Pass 1 of the assembler.

    Usage:
        resolver = SymbolResolver()
        resolver.resolve(split_lines(source), "prog.mas")
        resolver.address_of("Loop")

    Attributes:
        symbols: Mapping of label name to Symbol
        instruction_count: Number of code-producing lines seen
    """

    def __init__(self, capacity: int = MEMORY_SIZE):
        self.capacity = capacity
        self.symbols: dict[str, Symbol] = {}
        self.instruction_count = 0

    def resolve(self, lines: list[str], filename: str = "<input>") -> dict[str, Symbol]:
        """
        Build the symbol table for a program.

        Args:
            lines: Source lines (without line terminators)
            filename: Name used in error locations

        Returns:
            The symbol table

        Raises:
            LexicalError: If a line cannot be tokenized
            DuplicateSymbolError: If a label is defined twice
            CapacityError: If the program needs more words than memory holds
        """
        self.symbols.clear()
        address = 0

        for line_number, line in enumerate(lines, start=1):
            tokens = Lexer(line, filename, line_number).tokenize()
            if not tokens:
                continue

            label, _ = split_label(tokens)
            if label is not None:
                self._define(label.text, address, label.location, line)

            address += 1

        self.instruction_count = address
        logger.debug(
            f"Pass 1: {address} words, {len(self.symbols)} symbols in {filename}"
        )

        if address > self.capacity:
            raise CapacityError(address, self.capacity)

        return self.symbols

    def _define(self, name: str, address: int, location: SourceLocation, line: str) -> None:
        """Bind a label to an address, rejecting redefinitions."""
        if name in self.symbols:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=self.symbols[name].location,
                source_line=line,
            )
        self.symbols[name] = Symbol(name, address, location)
        logger.debug(f"Pass 1: bound {name} to {address:03X}")

    def address_of(self, name: str) -> int | None:
        """Return the address bound to a label, or None if undefined."""
        symbol = self.symbols.get(name)
        return symbol.address if symbol else None

    def similar_symbols(self, name: str) -> list[str]:
        """
        Find labels with similar names for error hints.

        Matches case differences and names within edit distance 2.
        """
        name_lower = name.lower()
        similar = []

        for sym in self.symbols:
            sym_lower = sym.lower()
            if (
                sym_lower == name_lower or
                abs(len(sym) - len(name)) <= 1 and
                _edit_distance(name_lower, sym_lower) <= 2
            ):
                similar.append(sym)

        return similar[:3]

    def as_dict(self) -> dict[str, int]:
        """Return the symbol table as a plain name -> address mapping."""
        return {name: sym.address for name, sym in self.symbols.items()}


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
