"""
Hack Assembler - Main Interface
===============================

This module provides the main Assembler class, the primary interface for
turning Hack assembly into Hack machine code. It feeds source lines to the
code generator and hands the finished words to the output writers.

Example Usage
-------------
>>> from hackasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> words = asm.assemble_string('''
... @2
... D=A
... @3
... D=D+A
... @0
... M=D
... ''')
>>> asm.get_binary()[1]
'1110110000010000'
>>> asm.write_hack("Add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm -o Add.hack -l Add.lst -s Add.sym

Options:
    -o, --output FILE      Output .hack file (default: input.hack)
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    --overflow error|wrap  Policy for @n with n > 32767
    --strict-identifiers   Reject identifiers longer than the limit
    -v, --verbose          Verbose output
"""

import codecs
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional
import logging

from hackasm.assembler.codegen import CodeGenerator
from hackasm.config import AssemblerConfig
from hackasm.cpu import InstructionWord
from hackasm.errors import AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main Hack assembler class.

    Each call to one of the assemble methods is an independent run with
    its own symbol table; results of the last run stay available through
    the getters and writers until the next call.

    Attributes:
        config: Limits and policies for the run
        verbose: If True, log progress at INFO level
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembler configuration (defaults to AssemblerConfig())
            verbose: Log progress messages
        """
        self.config = config or AssemblerConfig()
        self._verbose = verbose
        self._codegen = CodeGenerator(self.config)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str],
                       filename: str = "<input>") -> list[InstructionWord]:
        """
        Assemble an iterable of source lines.

        Args:
            lines: Raw source lines (an open file works)
            filename: Virtual filename for error messages

        Returns:
            Encoded instructions in source order

        Raises:
            AssemblerError: If assembly fails
        """
        words = self._codegen.generate(lines, filename)

        if self._verbose:
            logger.info(f"Assembled {len(words)} instructions from {filename}")

        return words

    def assemble_string(self, source: str,
                        filename: str = "<input>") -> list[InstructionWord]:
        """
        Assemble source code from a string.

        Raises:
            AssemblerError: If assembly fails
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> list[InstructionWord]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Encoded instructions in source order

        Raises:
            AssemblerError: If assembly fails
            AssemblySyntaxError: If a line is not valid UTF-8
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)

        if self._verbose:
            logger.info(f"Assembling {filepath}...")

        with open(filepath, "rb") as f:
            return self.assemble_lines(_decode_lines(f, str(filepath)), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> list[InstructionWord]:
        """Get the encoded instructions of the last run."""
        return self._codegen.get_words()

    def get_binary(self) -> list[str]:
        """Get the instructions as 16-character binary strings."""
        return self._codegen.get_binary()

    def get_hack(self) -> str:
        """Get the .hack file contents."""
        return self._codegen.get_hack()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping symbol names to addresses
        """
        return self._codegen.get_symbols()

    def get_listing(self) -> str:
        """Get the assembly listing as a string."""
        return self._codegen.get_listing()

    def write_hack(self, filepath: str | Path) -> None:
        """
        Write the .hack output file.

        Each line holds one instruction as 16 '0'/'1' characters.
        """
        self._codegen.write_hack(filepath)

        if self._verbose:
            logger.info(f"Wrote {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        The listing file shows:
        - ROM addresses
        - Binary words
        - Source lines
        - Symbol table
        """
        self._codegen.write_listing(filepath)

        if self._verbose:
            logger.info(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write symbol table file."""
        self._codegen.write_symbols(filepath)

        if self._verbose:
            logger.info(f"Wrote symbols to {filepath}")

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        return self._codegen.has_errors()

    def get_error_report(self) -> str:
        return self._codegen.get_error_report()


def _decode_lines(f: BinaryIO, filename: str) -> Iterator[str]:
    """
    Decode a binary source file one line at a time, so an invalid byte is
    reported at its own line and column.
    """
    for number, raw in enumerate(f, start=1):
        if number == 1:
            raw = raw.removeprefix(codecs.BOM_UTF8)
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            column = len(raw[:e.start].decode("utf-8", errors="replace")) + 1
            raise AssemblySyntaxError(
                f"invalid UTF-8 byte 0x{raw[e.start]:02x}",
                location=SourceLocation(filename, number, column),
                source_line=text,
                hint="source files must be UTF-8 or plain ASCII",
            ) from e
        yield line


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> list[str]:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        config: Optional assembler configuration

    Returns:
        Instructions as 16-character binary strings

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config)
    asm.assemble_string(source, filename)
    return asm.get_binary()


def assemble_file(filepath: str | Path,
                  config: Optional[AssemblerConfig] = None) -> list[str]:
    """
    Convenience function to assemble a file.

    Returns:
        Instructions as 16-character binary strings

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config)
    asm.assemble_file(filepath)
    return asm.get_binary()
