"""
Hack Code Generator
===================

This module generates Hack machine code from classified source lines.
It implements the classic two-pass assembly process:

Pass 1 (Label Resolution)
-------------------------
- Scan every line in order with an instruction counter starting at 0
- Bind each ``(LABEL)`` to the counter value, i.e. the ROM address of the
  instruction that follows it
- Advance the counter only on instruction lines

Pass 2 (Code Generation)
------------------------
- Parse each instruction line
- ``@number``: emit the literal (range policy from AssemblerConfig)
- ``@symbol``: look the symbol up, allocating a variable from RAM[16]
  upward on first use
- ``dest=comp;jump``: look up the computation and jump codes and build
  the C-instruction word

Pass 1 finishes over the whole source before pass 2 starts, so forward
and backward label references resolve the same way. Errors are
collected per line; a pass that produced any error stops the run with a
single report and no output.

Output Formats
--------------
- ``.hack`` text: one 16-character binary string per instruction
- Listing file with ROM addresses, binary words and source
- Symbol table file
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional
import logging
import os
import tempfile

from hackasm.assembler.lexer import LineClassifier, SourceLine
from hackasm.assembler.parser import AddressStatement, ComputeStatement, Parser, Statement
from hackasm.assembler.symbols import SymbolTable
from hackasm.config import OVERFLOW_WRAP, AssemblerConfig
from hackasm.cpu import (
    MAX_ADDRESS,
    AddressInstruction,
    ComputeInstruction,
    InstructionWord,
    comp_mnemonics,
    dest_mask,
    jump_mnemonics,
    lookup_comp,
    lookup_jump,
)
from hackasm.errors import (
    AssemblerError,
    ErrorCollector,
    LiteralRangeError,
    UnknownMnemonicError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Listing Entry
# =============================================================================

@dataclass(frozen=True)
class ListingEntry:
    """
    One encoded instruction for the listing file.

    Attributes:
        address: ROM address of the instruction
        word: The encoded instruction
        source: The line it was assembled from
    """
    address: int
    word: InstructionWord
    source: SourceLine


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates Hack machine code from source lines.

    The code generator owns, for one run:
    - The symbol table (predefined symbols, labels, variables)
    - The ordered list of encoded instruction words
    - Error collection for batch reporting

    Usage:
        codegen = CodeGenerator()
        words = codegen.generate(source.splitlines(), "Prog.asm")
        codegen.write_hack("Prog.hack")
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._symbols = SymbolTable(self.config.first_variable_address)
        self._lines: list[SourceLine] = []
        self._words: list[InstructionWord] = []
        self._listing: list[ListingEntry] = []
        self._complete = False
        self._errors = ErrorCollector(self.config.max_errors)

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, lines: Iterable[str], filename: str = "<input>") -> list[InstructionWord]:
        """
        Assemble source lines into instruction words.

        This is the main entry point for code generation. The symbol table
        and output of any previous run are discarded first.

        Args:
            lines: Raw source lines, with or without line terminators
            filename: Name used in diagnostics

        Returns:
            The encoded instructions in source order

        Words are kept only when both passes succeed; after a failed run
        there is no output to read or write.

        Raises:
            AssemblerError: If either pass reported errors
        """
        self._symbols = SymbolTable(self.config.first_variable_address)
        self._lines = []
        self._words = []
        self._listing = []
        self._complete = False
        self._errors.clear()

        classifier = LineClassifier(filename, self.config)

        self._pass1(classifier, lines)
        self._raise_if_errors()

        words, listing = self._pass2()
        self._raise_if_errors()

        self._words = words
        self._listing = listing
        self._complete = True

        logger.debug(
            f"{filename}: {len(self._words)} instructions, "
            f"{len(self._symbols.labels())} labels, "
            f"{self._symbols.variable_count} variables"
        )
        return list(self._words)

    def get_words(self) -> list[InstructionWord]:
        """Return the encoded instructions of the last run."""
        return list(self._words)

    def get_binary(self) -> list[str]:
        """Return the instructions as 16-character binary strings."""
        return [word.to_binary() for word in self._words]

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return self._symbols.to_dict()

    @property
    def symbol_table(self) -> SymbolTable:
        return self._symbols

    def has_errors(self) -> bool:
        """Check if any errors occurred during assembly."""
        return self._errors.has_errors()

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self._errors.report()

    # =========================================================================
    # Output
    # =========================================================================

    def get_hack(self) -> str:
        """Return the .hack text: one binary word per line."""
        return "".join(f"{line}\n" for line in self.get_binary())

    def write_hack(self, filepath: str | Path) -> None:
        """Write the .hack file."""
        self._require_output()
        _write_text(filepath, self.get_hack())

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing ROM addresses, binary words and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("Hack Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Word              Line  Source")
        lines.append("-" * 60)
        for entry in self._listing:
            lines.append(
                f"{entry.address:5d}  {entry.word.to_binary()}  "
                f"{entry.source.line:4d}  {entry.source.text}"
            )
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for sym in sorted(self._symbols, key=lambda s: s.name):
            lines.append(f"{sym.name:20s} = {sym.address:5d}  ({sym.kind.value})")
        return "\n".join(lines) + "\n"

    def write_listing(self, filepath: str | Path) -> None:
        """Write assembly listing file."""
        self._require_output()
        _write_text(filepath, self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, sorted by name)
        """
        self._require_output()
        lines = ["# Symbol table", "# Generated by hackasm"]
        for name, address in sorted(self._symbols.to_dict().items()):
            lines.append(f"{name} {address}")
        _write_text(filepath, "\n".join(lines) + "\n")

    # =========================================================================
    # Pass 1: Label Resolution
    # =========================================================================

    def _pass1(self, classifier: LineClassifier, lines: Iterable[str]) -> None:
        """
        First pass: classify lines and bind labels.

        Classified lines are kept so pass 2 reads the same source without
        going back to the line reader.
        """
        counter = 0

        for number, raw in enumerate(lines, start=1):
            try:
                line = classifier.classify(raw, number)
                self._lines.append(line)

                if line.is_label:
                    self._symbols.define_label(
                        line.label, counter, line.location, line.original
                    )
                elif line.is_instruction:
                    counter += 1
            except AssemblerError as e:
                self._errors.add(e)

        logger.debug(f"pass 1: {counter} instructions, {len(self._lines)} lines")

    # =========================================================================
    # Pass 2: Code Generation
    # =========================================================================

    def _pass2(self) -> tuple[list[InstructionWord], list[ListingEntry]]:
        """
        Second pass: parse and encode every instruction line.

        Returns the words and listing entries; the caller keeps them only
        if no line failed.
        """
        parser = Parser(self.config)
        words: list[InstructionWord] = []
        listing: list[ListingEntry] = []

        for line in self._lines:
            if not line.is_instruction:
                continue
            try:
                word = self._encode(parser.parse(line))
            except AssemblerError as e:
                self._errors.add(e)
                continue

            listing.append(ListingEntry(len(words), word, line))
            words.append(word)

        return words, listing

    def _encode(self, stmt: Statement) -> InstructionWord:
        if isinstance(stmt, AddressStatement):
            return self._encode_address(stmt)
        return self._encode_compute(stmt)

    def _encode_address(self, stmt: AddressStatement) -> AddressInstruction:
        """Encode an A-instruction, allocating a variable if needed."""
        if stmt.literal is not None:
            value = stmt.literal
            if value > MAX_ADDRESS:
                if self.config.literal_overflow != OVERFLOW_WRAP:
                    raise LiteralRangeError(
                        value, MAX_ADDRESS,
                        location=stmt.location,
                        source_line=stmt.source.original,
                    )
                logger.warning(
                    f"{stmt.location}: literal {value} wrapped to {value & MAX_ADDRESS}"
                )
                value &= MAX_ADDRESS
            return AddressInstruction(value)

        address = self._symbols.resolve_or_allocate(
            stmt.symbol, stmt.location, stmt.source.original
        )
        return AddressInstruction(address)

    def _encode_compute(self, stmt: ComputeStatement) -> ComputeInstruction:
        """
        Encode a C-instruction.

        M and A share computation codes; a computation that reads M is
        looked up in its A form with the selector bit set.
        """
        selector = 1 if "M" in stmt.comp else 0
        comp = lookup_comp(stmt.comp.replace("M", "A"))
        if comp is None:
            raise UnknownMnemonicError(
                stmt.comp, "computation",
                location=stmt.location,
                source_line=stmt.source.original,
                valid=comp_mnemonics(),
            )

        jump = lookup_jump(stmt.jump)
        if jump is None:
            raise UnknownMnemonicError(
                stmt.jump, "jump",
                location=stmt.location,
                source_line=stmt.source.original,
                valid=jump_mnemonics(),
            )

        return ComputeInstruction(
            selector=selector,
            comp=comp,
            dest=dest_mask(stmt.dest),
            jump=jump,
        )

    def _require_output(self) -> None:
        if not self._complete:
            raise AssemblerError(
                "no output to write: the last assembly run did not succeed",
                hint="fix the reported errors and assemble again",
            )

    def _raise_if_errors(self) -> None:
        # A single error is raised as is, keeping its specific type
        if self._errors.error_count() == 1:
            raise self._errors.errors[0]
        if self._errors.has_errors():
            raise AssemblerError(
                f"assembly failed with {self._errors.error_count()} errors:\n\n"
                f"{self._errors.report()}"
            )


def _write_text(filepath: str | Path, text: str) -> None:
    """
    Write text through a temporary file in the target directory.

    The target is replaced only once the whole text is on disk, so a
    failed write never leaves a truncated output file behind.
    """
    filepath = Path(filepath)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
    )
    try:
        with os.fdopen(fd, "w", newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, filepath)
    except BaseException:
        os.unlink(tmp_name)
        raise
