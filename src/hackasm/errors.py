"""
hackasm Error Hierarchy
=======================

This module defines the exception hierarchy for the whole assembler.
All exceptions inherit from HackError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
HackError (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - malformed instruction, label or line
    ├── UnknownMnemonicError - expression or jump not in the fixed tables
    ├── DuplicateSymbolError - label declared twice or shadowing a builtin
    ├── LiteralRangeError - address literal does not fit in 15 bits
    ├── SymbolTableError - variable address space exhausted
    └── TooManyErrors - error collector limit reached

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

class HackError(Exception):
    """
    Base exception for all hackasm errors.

        try:
            Assembler().assemble_file("Prog.asm")
        except HackError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

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

class AssemblerError(HackError):
    """
    Base exception for all assembler errors.

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

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            Max.asm:7:1: error: unknown computation 'D*A'
                D=D*A
                ^
            hint: valid computations are 0, 1, -1, D, A, ...
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Malformed source text.

    Examples:
        - Source line longer than the configured maximum
        - Empty label declaration "()"
        - "@" with nothing after it, or "@12x"
        - Destination characters other than A, D and M
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """
    Computation or jump mnemonic not present in the instruction tables.

    Attributes:
        mnemonic: The offending text as written in the source
        kind: "computation" or "jump"
    """

    def __init__(
        self,
        mnemonic: str,
        kind: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.kind = kind
        self.valid = valid or []

        hint = None
        if self.valid:
            hint = f"valid {kind}s are {', '.join(self.valid)}"

        super().__init__(
            f"unknown {kind} '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label declared more than once, or a label reusing a predefined name.

    Labels are bound once during the first pass and never rebound.
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

        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"
        else:
            hint = f"'{symbol}' is a predefined symbol"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class LiteralRangeError(AssemblerError):
    """
    Address literal larger than 15 bits.

    Only raised under the "error" overflow policy; the "wrap" policy keeps
    the value modulo 2**15 instead.
    """

    def __init__(
        self,
        value: int,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.limit = limit

        super().__init__(
            f"address literal {value} is out of range (0..{limit})",
            location=location,
            hint="set literal_overflow='wrap' in AssemblerConfig "
                 "(hackasm --overflow wrap) to keep the low 15 bits",
            source_line=source_line,
        )


class SymbolTableError(AssemblerError):
    """Raised when no free address is left for a new variable."""
    pass


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The code generator records one error per bad line and keeps going, so a
    single run reports every problem in the file.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(UnknownMnemonicError("D*A", "computation"))
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(
                f"too many errors ({self.max_errors}), stopping\n\n{self.report()}"
            )

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def error_count(self) -> int:
        return len(self.errors)

    def report(self) -> str:
        """
        Format all errors for display.

        Returns:
            Formatted string with all errors
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    This stops the assembler from flooding the user when the input is
    not assembly source at all.
    """

    def __init__(self, message: str = "too many errors"):
        super().__init__(message)
