"""
Hack Symbol Table
=================

Maps identifiers to resolved 15-bit addresses for one assembly run.

A fresh table holds the predefined symbols (SP, LCL, ARG, THIS, THAT,
R0-R15, SCREEN, KBD). The first pass adds labels; the second pass adds
variables on first use, handing out RAM addresses from 16 upward.

Names are case-sensitive. Every name maps to exactly one address, a bound
label is never rebound, and variable addresses are never reused.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional
import logging

from hackasm.cpu import MAX_ADDRESS, PREDEFINED_SYMBOLS, VARIABLE_BASE
from hackasm.errors import DuplicateSymbolError, SourceLocation, SymbolTableError

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
    """Where a symbol's address came from."""
    PREDEFINED = "predefined"
    LABEL = "label"
    VARIABLE = "variable"


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name as written in the source
        address: Resolved address
        kind: Predefined, label or variable
        location: Where the symbol was first seen (None for predefined)
    """
    name: str
    address: int
    kind: SymbolKind
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Symbol table owned by a single assembly run.

    Usage:
        table = SymbolTable()
        table.define_label("LOOP", 4, location)
        table.resolve("LOOP")            # 4
        table.resolve_or_allocate("i")   # 16
        table.resolve_or_allocate("i")   # 16 again
    """

    def __init__(self, first_variable_address: int = VARIABLE_BASE):
        self._symbols: dict[str, Symbol] = {
            name: Symbol(name, address, SymbolKind.PREDEFINED)
            for name, address in PREDEFINED_SYMBOLS.items()
        }
        self._first_variable_address = first_variable_address
        self._next_variable_address = first_variable_address

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    @property
    def next_variable_address(self) -> int:
        """Address the next new variable will receive."""
        return self._next_variable_address

    @property
    def variable_count(self) -> int:
        return self._next_variable_address - self._first_variable_address

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def resolve(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None if unbound."""
        symbol = self._symbols.get(name)
        return symbol.address if symbol is not None else None

    def define_label(
        self,
        name: str,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Bind a label to the address of the instruction that follows it.

        Raises:
            DuplicateSymbolError: If the name is already bound
        """
        existing = self._symbols.get(name)
        if existing is not None:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        symbol = Symbol(name, address, SymbolKind.LABEL, location)
        self._symbols[name] = symbol
        logger.debug(f"label {name} = {address}")
        return symbol

    def resolve_or_allocate(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Return the address of name, allocating a variable on first use.

        Raises:
            SymbolTableError: If the new variable would not fit in 15 bits
        """
        symbol = self._symbols.get(name)
        if symbol is not None:
            return symbol.address

        address = self._next_variable_address
        if address > MAX_ADDRESS:
            raise SymbolTableError(
                f"no address left for variable '{name}'",
                location=location,
                source_line=source_line,
            )

        self._symbols[name] = Symbol(name, address, SymbolKind.VARIABLE, location)
        self._next_variable_address += 1
        logger.debug(f"variable {name} = {address}")
        return address

    def labels(self) -> dict[str, int]:
        return self._of_kind(SymbolKind.LABEL)

    def variables(self) -> dict[str, int]:
        return self._of_kind(SymbolKind.VARIABLE)

    def to_dict(self) -> dict[str, int]:
        """Return a dictionary of every symbol name to its address."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def _of_kind(self, kind: SymbolKind) -> dict[str, int]:
        return {
            name: sym.address
            for name, sym in self._symbols.items()
            if sym.kind is kind
        }
