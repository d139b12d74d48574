"""
hackasm - Assembler for the Hack Computer
=========================================

This package provides a two-pass assembler for the Hack machine language,
the 16-bit von Neumann computer from "The Elements of Computing Systems"
(nand2tetris). It reads symbolic assembly (.asm) and writes Hack binary
(.hack): one line of sixteen '0'/'1' characters per instruction.

Main Components
---------------
- **assembler**: Line classifier, parser, symbol table and code generator
- **cpu**: Instruction formats and the fixed mnemonic tables
- **config**: Limits and policies for an assembly run
- **cli**: The ``hackasm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from hackasm import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_file("Max.asm")
    >>> asm.write_hack("Max.hack")

Or use the command-line tool:
    $ hackasm Max.asm -o Max.hack

Version History
---------------
1.0.0 - Initial release with assembler, listing and symbol output
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hackasm.assembler import Assembler, assemble, assemble_file
from hackasm.config import AssemblerConfig
from hackasm.cpu import AddressInstruction, ComputeInstruction
from hackasm.errors import (
    HackError,
    AssemblerError,
    AssemblySyntaxError,
    UnknownMnemonicError,
    DuplicateSymbolError,
    LiteralRangeError,
    SymbolTableError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    # Instruction words
    "AddressInstruction",
    "ComputeInstruction",
    # Errors
    "HackError",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownMnemonicError",
    "DuplicateSymbolError",
    "LiteralRangeError",
    "SymbolTableError",
    "SourceLocation",
]
